"""Websocket event envelope and per-type payload models.

Each frame received from ``/ws`` is one JSON object::

    {"type": "message_new", "meta": {"timestamp": 1600000000}, "app_id": 3, "data": {...}}

:meth:`WsEvent.parse` decodes the envelope only.  ``data`` stays untyped
until the caller picks a model with :meth:`WsEvent.decode_as`, or lets
:meth:`WsEvent.decode_data` look it up in :data:`EVENT_DATA_TYPES`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import Field, ValidationError

from mgbot.constants import (
    WS_EVENT_BOT_UPDATED,
    WS_EVENT_CHANNEL_UPDATED,
    WS_EVENT_CHAT_CREATED,
    WS_EVENT_CHAT_UPDATED,
    WS_EVENT_CHATS_DELETED,
    WS_EVENT_CUSTOMER_UPDATED,
    WS_EVENT_DIALOG_ASSIGN,
    WS_EVENT_DIALOG_CLOSED,
    WS_EVENT_DIALOG_OPENED,
    WS_EVENT_MESSAGE_DELETED,
    WS_EVENT_MESSAGE_NEW,
    WS_EVENT_MESSAGE_UPDATED,
    WS_EVENT_USER_JOINED,
    WS_EVENT_USER_LEAVE,
    WS_EVENT_USER_ONLINE_UPDATED,
    WS_EVENT_USER_UPDATED,
)
from mgbot.exceptions import DecodeError
from mgbot.models import (
    Chat,
    ChannelResponseItem,
    Dialog,
    Message,
    MessageRef,
    MgModel,
    UserRef,
    WaitingChat,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=MgModel)


class EventMeta(MgModel):
    timestamp: int


class WsEvent(MgModel):
    """One decoded event frame with its payload still undecoded."""

    type: str
    meta: Optional[EventMeta] = None
    app_id: Optional[int] = None
    data: Any = None

    @classmethod
    def parse(cls, frame: Union[bytes, str]) -> "WsEvent":
        """Decode the envelope of a single frame.

        Raises:
            DecodeError: If the frame is not JSON or lacks the ``type`` tag.
        """
        try:
            raw = json.loads(frame)
        except ValueError as exc:
            raise DecodeError(f"invalid event frame: {exc}") from exc
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise DecodeError(f"invalid event envelope: {exc}") from exc

    def decode_as(self, model: Type[T]) -> T:
        """Decode ``data`` into *model*.

        Raises:
            DecodeError: If ``data`` does not match *model*.
        """
        try:
            return model.model_validate(self.data)
        except ValidationError as exc:
            raise DecodeError(f"cannot decode {self.type} event data as {model.__name__}: {exc}") from exc

    def decode_data(self) -> Optional[MgModel]:
        """Decode ``data`` with the model registered for this event type.

        Returns ``None`` for event types without a registered model.
        """
        model = EVENT_DATA_TYPES.get(self.type)
        if model is None:
            logger.debug("No payload model for event", extra={"event_type": self.type})
            return None
        return self.decode_as(model)


# ── Event payloads ───────────────────────────────────────────────────────────


class WsEventMessageNewData(MgModel):
    message: Optional[Message] = None


class WsEventMessageUpdatedData(MgModel):
    message: Optional[Message] = None


class WsEventMessageDeletedData(MgModel):
    message: Optional[Message] = None


class WsEventDialogOpenedData(MgModel):
    dialog: Optional[Dialog] = None


class WsEventDialogClosedData(MgModel):
    dialog: Optional[Dialog] = None


class WsEventDialogAssignData(MgModel):
    dialog: Optional[Dialog] = None
    chat: Optional[Chat] = None


class WsEventWaitingChatCreatedData(MgModel):
    chat: Optional[WaitingChat] = None


class WsEventWaitingChatUpdatedData(MgModel):
    chat: Optional[WaitingChat] = None


class EventUserJoinedChatData(MgModel):
    chat: Optional[Chat] = None
    user: Optional[UserRef] = None


class WsEventUserLeaveData(MgModel):
    reason: Optional[str] = None
    chat: Optional[MessageRef] = None
    user: Optional[MessageRef] = None


class WsEventUserUpdatedData(UserRef):
    is_active: bool = False


class WsEventCustomerUpdatedData(UserRef):
    pass


class WsEventBotUpdatedData(UserRef):
    pass


class WsEventUserOnlineUpdatedData(MgModel):
    user: Optional[UserRef] = None
    online: bool = False
    connected: bool = False


class WsEventChatsDeletedData(MgModel):
    chat_ids: List[int] = Field(default_factory=list)


class WsEventChannelUpdatedData(MgModel):
    channel: Optional[ChannelResponseItem] = None


EVENT_DATA_TYPES: Dict[str, Type[MgModel]] = {
    WS_EVENT_MESSAGE_NEW: WsEventMessageNewData,
    WS_EVENT_MESSAGE_UPDATED: WsEventMessageUpdatedData,
    WS_EVENT_MESSAGE_DELETED: WsEventMessageDeletedData,
    WS_EVENT_DIALOG_OPENED: WsEventDialogOpenedData,
    WS_EVENT_DIALOG_CLOSED: WsEventDialogClosedData,
    WS_EVENT_DIALOG_ASSIGN: WsEventDialogAssignData,
    WS_EVENT_CHAT_CREATED: WsEventWaitingChatCreatedData,
    WS_EVENT_CHAT_UPDATED: WsEventWaitingChatUpdatedData,
    WS_EVENT_USER_JOINED: EventUserJoinedChatData,
    WS_EVENT_USER_LEAVE: WsEventUserLeaveData,
    WS_EVENT_USER_UPDATED: WsEventUserUpdatedData,
    WS_EVENT_CUSTOMER_UPDATED: WsEventCustomerUpdatedData,
    WS_EVENT_BOT_UPDATED: WsEventBotUpdatedData,
    WS_EVENT_USER_ONLINE_UPDATED: WsEventUserOnlineUpdatedData,
    WS_EVENT_CHATS_DELETED: WsEventChatsDeletedData,
    WS_EVENT_CHANNEL_UPDATED: WsEventChannelUpdatedData,
}
