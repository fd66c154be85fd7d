"""Tests for websocket event decoding."""

import json
import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from mgbot.events import (
    EVENT_DATA_TYPES,
    WsEvent,
    WsEventChatsDeletedData,
    WsEventDialogAssignData,
    WsEventMessageNewData,
    WsEventUserLeaveData,
    WsEventUserUpdatedData,
)
from mgbot.exceptions import DecodeError
from mgbot.models import TextMessage


def _frame(event_type: str, data: object) -> str:
    return json.dumps({"type": event_type, "meta": {"timestamp": 1600000000}, "app_id": 3, "data": data})


class TestEnvelope:
    """Validate WsEvent.parse."""

    def test_parse(self) -> None:
        event = WsEvent.parse(_frame("message_new", {"message": {"type": "text"}}))
        assert event.type == "message_new"
        assert event.meta.timestamp == 1600000000
        assert event.app_id == 3

    def test_data_stays_raw(self) -> None:
        event = WsEvent.parse(_frame("message_new", {"message": {"id": 1, "type": "text"}}))
        assert event.data == {"message": {"id": 1, "type": "text"}}

    def test_parse_bytes(self) -> None:
        assert WsEvent.parse(_frame("user_updated", {"id": 1}).encode()).type == "user_updated"

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError):
            WsEvent.parse("not json")

    def test_missing_type(self) -> None:
        with pytest.raises(DecodeError):
            WsEvent.parse('{"data": {}}')


class TestPayloads:
    """Validate decode_as and decode_data."""

    def test_message_new(self) -> None:
        event = WsEvent.parse(_frame("message_new", {
            "message": {"id": 10, "type": "text", "content": "hi", "chat_id": 4, "from": {"id": 2, "type": "customer"}},
        }))

        data = event.decode_data()

        assert isinstance(data, WsEventMessageNewData)
        assert isinstance(data.message, TextMessage)
        assert data.message.content == "hi"

    def test_decode_as_explicit_model(self) -> None:
        event = WsEvent.parse(_frame("user_updated", {"id": 5, "name": "Ann", "is_active": True}))

        data = event.decode_as(WsEventUserUpdatedData)
        assert data.id == 5
        assert data.is_active is True

    def test_decode_as_mismatch(self) -> None:
        event = WsEvent.parse(_frame("user_updated", {"name": "no id"}))

        with pytest.raises(DecodeError):
            event.decode_as(WsEventUserUpdatedData)

    def test_dialog_assign(self) -> None:
        event = WsEvent.parse(_frame("dialog_assign", {
            "dialog": {"id": 1, "responsible": {"id": 6, "type": "user"}},
            "chat": {"id": 2, "members": [{"is_author": True, "state": "active", "user": {"id": 6}}]},
        }))

        data = event.decode_data()
        assert isinstance(data, WsEventDialogAssignData)
        assert data.dialog.responsible.id == 6
        assert data.chat.members[0].is_author is True

    def test_user_left_chat(self) -> None:
        event = WsEvent.parse(_frame("user_left_chat", {"reason": "kicked", "chat": {"id": 1}, "user": {"id": 2}}))

        data = event.decode_data()
        assert isinstance(data, WsEventUserLeaveData)
        assert data.reason == "kicked"

    def test_chats_deleted(self) -> None:
        data = WsEvent.parse(_frame("chats_deleted", {"chat_ids": [1, 2]})).decode_data()
        assert isinstance(data, WsEventChatsDeletedData)
        assert data.chat_ids == [1, 2]

    def test_chats_deleted_null_ids(self) -> None:
        data = WsEvent.parse('{"type": "chats_deleted", "data": {"chat_ids": null}}').decode_data()
        assert isinstance(data, WsEventChatsDeletedData)
        assert data.chat_ids == []

    def test_user_updated_null_flags(self) -> None:
        data = WsEvent.parse(_frame("user_updated", {"id": 5, "is_active": None, "is_admin": None})).decode_data()
        assert isinstance(data, WsEventUserUpdatedData)
        assert data.is_active is False
        assert data.is_admin is False

    def test_unknown_type_returns_none(self) -> None:
        event = WsEvent.parse(_frame("something_new", {"x": 1}))
        assert event.decode_data() is None
        assert event.data == {"x": 1}

    def test_registry_keys(self) -> None:
        assert "message_new" in EVENT_DATA_TYPES
        assert "settings_updated" not in EVENT_DATA_TYPES
