"""Pydantic models for MG bot API requests, responses and messages.

Request models encode themselves (:meth:`BaseRequest.to_query` for list
filters, :meth:`BaseRequest.to_body` for mutations).  Every optional field
defaults to ``None`` and ``None`` never reaches the wire, so "not set" stays
distinguishable from an explicit ``0``, ``False`` or ``""``.

:data:`Message` is a discriminated union keyed on the message ``type``.
Each variant only declares the fields of its own payload kind.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urlencode

from pydantic import BaseModel, Discriminator, Field, Tag, ValidationInfo, field_validator, model_validator

from mgbot.constants import (
    MSG_TYPE_COMMAND,
    MSG_TYPE_FILE,
    MSG_TYPE_IMAGE,
    MSG_TYPE_ORDER,
    MSG_TYPE_PRODUCT,
    MSG_TYPE_SYSTEM,
    MSG_TYPE_TEXT,
)


class MgModel(BaseModel):
    """Common configuration for every API model.

    The API sends ``null`` for empty lists and unset flags; such values
    fall back to the field default instead of failing validation.
    """

    model_config = {"populate_by_name": True}

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


# ── Request encoding ─────────────────────────────────────────────────────────


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class BaseRequest(MgModel):
    """Base for request records; fields set to ``None`` are never encoded."""

    def to_query(self) -> str:
        """Return the URL-encoded query string (lists become repeated keys)."""
        pairs: List[Tuple[str, str]] = []
        for key, value in self.model_dump(mode="json", by_alias=True, exclude_none=True).items():
            if isinstance(value, list):
                pairs.extend((key, _query_value(item)) for item in value)
            else:
                pairs.append((key, _query_value(value)))
        return urlencode(pairs)

    def to_body(self) -> bytes:
        """Return the JSON request body without unset fields or path parameters."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


class BotsRequest(BaseRequest):
    id: Optional[int] = None
    active: Optional[bool] = None
    is_self: Optional[bool] = Field(None, alias="self")
    role: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class ChannelsRequest(BaseRequest):
    id: Optional[int] = None
    types: Optional[List[str]] = None
    active: Optional[bool] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class UsersRequest(BaseRequest):
    id: Optional[int] = None
    external_id: Optional[str] = None
    online: Optional[bool] = None
    active: Optional[bool] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class CustomersRequest(BaseRequest):
    id: Optional[int] = None
    channel_id: Optional[int] = None
    channel_type: Optional[str] = None
    external_id: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class ChatsRequest(BaseRequest):
    id: Optional[int] = None
    channel_id: Optional[int] = None
    channel_type: Optional[str] = None
    customer_id: Optional[int] = None
    customer_external_id: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None
    include_mass_communication: Optional[bool] = None


class MembersRequest(BaseRequest):
    chat_id: Optional[int] = None
    user_id: Optional[int] = None
    state: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class DialogsRequest(BaseRequest):
    id: Optional[int] = None
    chat_id: Optional[int] = None
    user_id: Optional[int] = None
    bot_id: Optional[int] = None
    assign: Optional[bool] = None
    active: Optional[bool] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None
    include_mass_communication: Optional[bool] = None


class DialogAssignRequest(BaseRequest):
    """Assign a dialog to a user or a bot; ``dialog_id`` goes into the URL."""

    dialog_id: int = Field(exclude=True)
    user_id: Optional[int] = None
    bot_id: Optional[int] = None


class TagsAdd(MgModel):
    name: str
    color_code: Optional[str] = None


class DialogTagsAddRequest(BaseRequest):
    dialog_id: int = Field(exclude=True)
    tags: List[TagsAdd]


class TagsDelete(MgModel):
    name: str


class DialogTagsDeleteRequest(BaseRequest):
    dialog_id: int = Field(exclude=True)
    tags: List[TagsDelete]


class MessagesRequest(BaseRequest):
    id: Optional[List[int]] = None
    chat_id: Optional[int] = None
    dialog_id: Optional[int] = None
    user_id: Optional[int] = None
    customer_id: Optional[int] = None
    bot_id: Optional[int] = None
    channel_id: Optional[int] = None
    channel_type: Optional[str] = None
    scope: Optional[str] = None
    type: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None
    include_mass_communication: Optional[bool] = None


class InfoRequest(BaseRequest):
    name: Optional[str] = None
    avatar: Optional[str] = Field(None, alias="avatar_url")
    roles: Optional[List[str]] = None


class CommandsRequest(BaseRequest):
    id: Optional[int] = None
    name: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None
    since_id: Optional[int] = None
    until_id: Optional[int] = None
    limit: Optional[int] = None


class CommandEditRequest(BaseRequest):
    """Create or replace a bot command; ``name`` is also the URL key."""

    name: str
    description: Optional[str] = None


class UploadFileByUrlRequest(BaseRequest):
    url: str


class UpdateFileMetadataRequest(BaseRequest):
    id: str = Field(exclude=True)
    transcription: Optional[str] = None
    # "in_progress", "ready" or "error"
    transcription_status: Optional[str] = None


# ── Shared entities ──────────────────────────────────────────────────────────


class Utm(MgModel):
    source: Optional[str] = None
    medium: Optional[str] = None
    campaign: Optional[str] = None
    term: Optional[str] = None
    content: Optional[str] = None


class UserRef(MgModel):
    """Reference to a user, customer or bot as embedded in other resources."""

    id: int
    external_id: Optional[str] = None
    avatar: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False
    available: bool = False
    is_technical_account: bool = False
    is_system: bool = False


class ChannelSupports(MgModel):
    messages: List[str] = []
    statuses: List[str] = []


class Channel(MgModel):
    id: int
    transport_id: Optional[int] = None
    type: Optional[str] = None
    name: Optional[str] = None
    supports: Optional[ChannelSupports] = None


class Responsible(MgModel):
    id: int
    type: Optional[str] = None
    assigned_at: Optional[str] = None


class Member(MgModel):
    is_author: bool = False
    state: Optional[str] = None
    user: Optional[UserRef] = None


class MessageRef(MgModel):
    id: int


class Chat(MgModel):
    id: int
    avatar: Optional[str] = None
    name: Optional[str] = None
    channel: Optional[Channel] = None
    members: List[Member] = []
    customer: Optional[UserRef] = None
    author_id: Optional[int] = None
    last_message: Optional[Message] = None
    last_user_message: Optional[MessageRef] = None
    last_activity: Optional[str] = None


class WaitingChat(Chat):
    waiting_level: Optional[str] = None


class Dialog(MgModel):
    id: int
    begin_message_id: Optional[int] = None
    ending_message_id: Optional[int] = None
    chat: Optional[Chat] = None
    responsible: Optional[Responsible] = None
    created_at: Optional[str] = None
    closed_at: Optional[str] = None
    utm: Optional[Utm] = None


# ── Channel settings ─────────────────────────────────────────────────────────
#
# Capability values are one of "none", "receive", "send" or "both".


class CRUDChannelSettings(MgModel):
    creating: Optional[str] = None
    editing: Optional[str] = None
    deleting: Optional[str] = None


class ChannelSettingsText(CRUDChannelSettings):
    quoting: Optional[str] = None
    max_chars_count: Optional[int] = None


class ChannelSettingsAttachments(CRUDChannelSettings):
    quoting: Optional[str] = None
    max_items_count: Optional[int] = None
    note_max_chars_count: Optional[int] = None


class ChannelSettingsAudio(MgModel):
    creating: Optional[str] = None
    quoting: Optional[str] = None
    deleting: Optional[str] = None
    max_items_count: Optional[int] = None


class ChannelSettingsSendingPolicy(MgModel):
    new_customer: Optional[str] = None
    after_reply_timeout: Optional[str] = None


class ChannelSettingsStatus(MgModel):
    delivered: Optional[str] = None
    read: Optional[str] = None


class ChannelSettingsSuggestions(MgModel):
    text: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ChannelSettings(MgModel):
    customer_external_id: Optional[str] = None
    sending_policy: Optional[ChannelSettingsSendingPolicy] = None
    status: Optional[ChannelSettingsStatus] = None
    text: Optional[ChannelSettingsText] = None
    product: Optional[CRUDChannelSettings] = None
    order: Optional[CRUDChannelSettings] = None
    image: Optional[ChannelSettingsAttachments] = None
    file: Optional[ChannelSettingsAttachments] = None
    audio: Optional[ChannelSettingsAudio] = None
    suggestions: Optional[ChannelSettingsSuggestions] = None


# ── Message payloads ─────────────────────────────────────────────────────────


class MessageOrderCost(MgModel):
    """A monetary amount; the value is sent exactly as given."""

    value: Optional[float] = None
    currency: str


class MessageOrderQuantity(MgModel):
    value: float
    unit: Optional[str] = None


class MessageOrderStatus(MgModel):
    code: Optional[str] = None
    name: Optional[str] = None


class MessageOrderItem(MgModel):
    name: Optional[str] = None
    url: Optional[str] = None
    img: Optional[str] = None
    quantity: Optional[MessageOrderQuantity] = None
    price: Optional[MessageOrderCost] = None


class MessageOrderPaymentStatus(MgModel):
    name: Optional[str] = None
    payed: bool = False


class MessageOrderPayment(MgModel):
    name: Optional[str] = None
    status: Optional[MessageOrderPaymentStatus] = None
    amount: Optional[MessageOrderCost] = None


class MessageOrderDelivery(MgModel):
    name: Optional[str] = None
    price: Optional[MessageOrderCost] = None
    address: Optional[str] = None
    comment: Optional[str] = None


class MessageOrder(MgModel):
    number: Optional[str] = None
    url: Optional[str] = None
    date: Optional[str] = None
    cost: Optional[MessageOrderCost] = None
    status: Optional[MessageOrderStatus] = None
    delivery: Optional[MessageOrderDelivery] = None
    payments: Optional[List[MessageOrderPayment]] = Field(None, alias="payment")
    items: Optional[List[MessageOrderItem]] = None


class MessageProduct(MgModel):
    id: int
    name: str
    article: Optional[str] = None
    url: Optional[str] = None
    img: Optional[str] = None
    cost: Optional[MessageOrderCost] = None
    quantity: Optional[MessageOrderQuantity] = None


class QuoteMessage(MgModel):
    id: int
    content: Optional[str] = None
    time: Optional[str] = None
    from_field: Optional[UserRef] = Field(None, alias="from")


class MessageDialog(MgModel):
    id: int


class File(MgModel):
    """File descriptor inside an attachment; ``type`` on the wire is the MIME type."""

    id: str
    mime: Optional[str] = Field(None, alias="type")
    kind: Optional[str] = None
    size: Optional[int] = None
    duration: Optional[int] = None
    preview_url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None
    transcription: Optional[str] = None


class Attachment(File):
    caption: Optional[str] = None


# ── Message union ────────────────────────────────────────────────────────────


class BaseMessage(MgModel):
    """Fields shared by every message kind."""

    id: Optional[int] = None
    time: Optional[str] = None
    type: str
    scope: Optional[str] = None
    chat_id: Optional[int] = None
    is_read: bool = False
    is_edit: bool = False
    status: Optional[str] = None
    chat: Optional[Chat] = None
    from_field: Optional[UserRef] = Field(None, alias="from")
    dialog: Optional[MessageDialog] = None
    # Only populated by the GET /messages listing.
    channel_id: Optional[int] = None
    channel_sent_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TextMessage(BaseMessage):
    """``text`` and ``command`` messages."""

    content: Optional[str] = None
    quote: Optional[QuoteMessage] = None
    actions: Optional[List[str]] = None


class SystemMessage(BaseMessage):
    action: Optional[str] = None
    user: Optional[UserRef] = None
    responsible: Optional[UserRef] = None


class ProductMessage(BaseMessage):
    product: Optional[MessageProduct] = None


class OrderMessage(BaseMessage):
    order: Optional[MessageOrder] = None


class AttachmentMessage(BaseMessage):
    """``file`` and ``image`` messages."""

    items: List[Attachment] = []
    note: Optional[str] = None


class UnknownMessage(BaseMessage):
    """A message kind this client does not model; extra fields are kept as-is."""

    model_config = {"extra": "allow"}


_MESSAGE_KINDS: Dict[str, str] = {
    MSG_TYPE_TEXT: "text",
    MSG_TYPE_COMMAND: "text",
    MSG_TYPE_SYSTEM: "system",
    MSG_TYPE_PRODUCT: "product",
    MSG_TYPE_ORDER: "order",
    MSG_TYPE_FILE: "attachments",
    MSG_TYPE_IMAGE: "attachments",
}


def _message_kind(value: Any) -> str:
    if isinstance(value, dict):
        msg_type = value.get("type")
    else:
        msg_type = getattr(value, "type", None)
    return _MESSAGE_KINDS.get(msg_type, "unknown")


Message = Annotated[
    Union[
        Annotated[TextMessage, Tag("text")],
        Annotated[SystemMessage, Tag("system")],
        Annotated[ProductMessage, Tag("product")],
        Annotated[OrderMessage, Tag("order")],
        Annotated[AttachmentMessage, Tag("attachments")],
        Annotated[UnknownMessage, Tag("unknown")],
    ],
    Discriminator(_message_kind),
]


# ── Outbound messages ────────────────────────────────────────────────────────


class Suggestion(MgModel):
    type: str
    title: Optional[str] = None


class TransportAttachments(MgModel):
    suggestions: List[Suggestion] = []


class Item(MgModel):
    """An uploaded file referenced by a ``file`` or ``image`` message."""

    id: str
    caption: Optional[str] = None


# Which payload field each sendable type requires; other types carry none.
_SEND_PAYLOAD_FIELDS: Dict[str, str] = {
    MSG_TYPE_PRODUCT: "product",
    MSG_TYPE_ORDER: "order",
    MSG_TYPE_FILE: "items",
    MSG_TYPE_IMAGE: "items",
}


class MessageSendRequest(BaseRequest):
    """Outbound message.  Only the payload matching ``type`` may be set.

    An unset ``type`` is sent as-is and treated by the API as ``text``.
    """

    type: Optional[str] = None
    scope: Optional[str] = None
    chat_id: Optional[int] = None
    content: Optional[str] = None
    product: Optional[MessageProduct] = None
    order: Optional[MessageOrder] = None
    items: Optional[List[Item]] = None
    quote_message_id: Optional[int] = None
    transport_attachments: Optional[TransportAttachments] = None

    @model_validator(mode="after")
    def _check_payload_kind(self) -> "MessageSendRequest":
        kind = self.type or MSG_TYPE_TEXT
        expected = _SEND_PAYLOAD_FIELDS.get(kind)
        present = {name for name in ("product", "order", "items") if getattr(self, name) is not None}
        if expected is not None and expected not in present:
            raise ValueError(f"{kind} message requires {expected}")
        unexpected = present - {expected}
        if unexpected:
            raise ValueError(f"{kind} message cannot carry {', '.join(sorted(unexpected))}")
        return self


class MessageEditRequest(BaseRequest):
    id: int = Field(exclude=True)
    content: Optional[str] = None


# ── Responses ────────────────────────────────────────────────────────────────


class ErrorResponse(MgModel):
    """Body of a rejected call; only ``errors[0]`` is surfaced."""

    errors: List[str] = Field(min_length=1)


class BotsResponseItem(MgModel):
    id: int
    name: Optional[str] = None
    client_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deactivated_at: Optional[str] = None
    is_active: bool = False
    is_self: bool = False
    roles: Optional[List[str]] = None


class ChannelResponseItem(MgModel):
    id: int
    type: Optional[str] = None
    name: Optional[str] = None
    settings: Optional[ChannelSettings] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    activated_at: Optional[str] = None
    deactivated_at: Optional[str] = None
    is_active: bool = False


class UsersResponseItem(MgModel):
    id: int
    external_id: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    revoked_at: Optional[str] = None
    available: bool = False
    is_online: bool = False
    connected: bool = False
    is_active: bool = False
    is_technical_account: bool = False
    avatar: Optional[str] = Field(None, alias="avatar_url")


class CustomersResponseItem(MgModel):
    id: int
    external_id: Optional[str] = None
    channel_id: Optional[int] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    revoked_at: Optional[str] = None
    avatar: Optional[str] = Field(None, alias="avatar_url")
    profile_url: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    utm: Optional[Utm] = None


class ChatResponseItem(MgModel):
    id: int
    avatar: Optional[str] = None
    name: Optional[str] = None
    channel: Optional[Channel] = None
    customer: Optional[UserRef] = None
    author_id: Optional[int] = None
    last_message: Optional[Message] = None
    last_user_message: Optional[MessageRef] = None
    last_activity: Optional[str] = None
    last_dialog: Optional[Dialog] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MemberResponseItem(MgModel):
    id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    is_author: bool = False
    state: Optional[str] = None
    chat_id: Optional[int] = None
    user_id: Optional[int] = None


class DialogResponseItem(MgModel):
    id: int
    chat_id: Optional[int] = None
    begin_message_id: Optional[int] = None
    ending_message_id: Optional[int] = None
    bot_id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    closed_at: Optional[str] = None
    is_assigned: bool = False
    responsible: Optional[Responsible] = None
    is_active: bool = False
    utm: Optional[Utm] = None


class DialogAssignResponse(MgModel):
    responsible: Optional[Responsible] = None
    previous_responsible: Optional[Responsible] = None
    left_user_id: Optional[int] = None
    is_reassign: bool = False


class DialogUnassignResponse(MgModel):
    previous_responsible: Optional[Responsible] = None


class MessageSendResponse(MgModel):
    message_id: int
    time: Optional[str] = None


class CommandsResponseItem(MgModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FullFileResponse(MgModel):
    id: Optional[str] = None
    type: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class FileMeta(MgModel):
    width: Optional[int] = None
    height: Optional[int] = None


class UploadFileResponse(MgModel):
    id: str
    hash: Optional[str] = None
    type: Optional[str] = None
    meta: Optional[FileMeta] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = Field(None, alias="source_url")
    created_at: Optional[datetime] = None


for _model in (
    Chat,
    WaitingChat,
    Dialog,
    BaseMessage,
    TextMessage,
    SystemMessage,
    ProductMessage,
    OrderMessage,
    AttachmentMessage,
    UnknownMessage,
    ChatResponseItem,
):
    _model.model_rebuild()
