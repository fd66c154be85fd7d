"""String constants understood by the MG bot API.

Values are sent and received verbatim, so they are plain ``str`` rather
than enums.
"""

API_PREFIX: str = "/api/bot/v1"
TOKEN_HEADER: str = "X-Bot-Token"
CONTENT_TYPE_JSON: str = "application/json"
DEFAULT_TIMEOUT: int = 60

# ── Channel types ────────────────────────────────────────────────────────────
CHANNEL_TYPE_TELEGRAM = "telegram"
CHANNEL_TYPE_FACEBOOK = "fbmessenger"
CHANNEL_TYPE_VIBER = "viber"
CHANNEL_TYPE_WHATSAPP = "whatsapp"
CHANNEL_TYPE_SKYPE = "skype"
CHANNEL_TYPE_VK = "vk"
CHANNEL_TYPE_INSTAGRAM = "instagram"
CHANNEL_TYPE_CONSULTANT = "consultant"
CHANNEL_TYPE_CUSTOM = "custom"

# ── Chat member states ───────────────────────────────────────────────────────
CHAT_MEMBER_STATE_ACTIVE = "active"
CHAT_MEMBER_STATE_KICKED = "kicked"
CHAT_MEMBER_STATE_LEAVED = "leaved"

# ── Message scopes and types ─────────────────────────────────────────────────
MESSAGE_SCOPE_PUBLIC = "public"
MESSAGE_SCOPE_PRIVATE = "private"

MSG_TYPE_TEXT = "text"
MSG_TYPE_SYSTEM = "system"
MSG_TYPE_COMMAND = "command"
MSG_TYPE_ORDER = "order"
MSG_TYPE_PRODUCT = "product"
MSG_TYPE_FILE = "file"
MSG_TYPE_IMAGE = "image"

# ── Orders ───────────────────────────────────────────────────────────────────
MSG_ORDER_STATUS_CODE_NEW = "new"
MSG_ORDER_STATUS_CODE_APPROVAL = "approval"
MSG_ORDER_STATUS_CODE_ASSEMBLING = "assembling"
MSG_ORDER_STATUS_CODE_DELIVERY = "delivery"
MSG_ORDER_STATUS_CODE_COMPLETE = "complete"
MSG_ORDER_STATUS_CODE_CANCEL = "cancel"

MSG_CURRENCY_RUB = "rub"
MSG_CURRENCY_UAH = "uah"
MSG_CURRENCY_BYR = "byr"
MSG_CURRENCY_KZT = "kzt"
MSG_CURRENCY_USD = "usd"
MSG_CURRENCY_EUR = "eur"

# ── Transport attachments ────────────────────────────────────────────────────
SUGGESTION_TYPE_TEXT = "text"
SUGGESTION_TYPE_EMAIL = "email"
SUGGESTION_TYPE_PHONE = "phone"

# ── Dialog tag colours ───────────────────────────────────────────────────────
COLOR_LIGHT_RED = "light-red"
COLOR_LIGHT_BLUE = "light-blue"
COLOR_LIGHT_GREEN = "light-green"
COLOR_LIGHT_ORANGE = "light-orange"
COLOR_LIGHT_GRAY = "light-gray"
COLOR_LIGHT_GRAYISH_BLUE = "light-grayish-blue"
COLOR_RED = "red"
COLOR_BLUE = "blue"
COLOR_GREEN = "green"
COLOR_ORANGE = "orange"
COLOR_GRAY = "gray"
COLOR_GRAYISH_BLUE = "grayish-blue"

# ── Waiting chats ────────────────────────────────────────────────────────────
WAITING_LEVEL_NONE = "none"
WAITING_LEVEL_WARNING = "warning"
WAITING_LEVEL_DANGER = "danger"

# ── Bots and channel capabilities ────────────────────────────────────────────
BOT_ROLE_DISTRIBUTOR = "distributor"
BOT_ROLE_RESPONSIBLE = "responsible"
BOT_ROLE_HIDDEN = "hidden"

CHANNEL_FEATURE_NONE = "none"
CHANNEL_FEATURE_RECEIVE = "receive"
CHANNEL_FEATURE_SEND = "send"
CHANNEL_FEATURE_BOTH = "both"

# ── Websocket events and options ─────────────────────────────────────────────
WS_EVENT_MESSAGE_NEW = "message_new"
WS_EVENT_MESSAGE_UPDATED = "message_updated"
WS_EVENT_MESSAGE_DELETED = "message_deleted"
WS_EVENT_DIALOG_OPENED = "dialog_opened"
WS_EVENT_DIALOG_CLOSED = "dialog_closed"
WS_EVENT_DIALOG_ASSIGN = "dialog_assign"
WS_EVENT_CHAT_CREATED = "chat_created"
WS_EVENT_CHAT_UPDATED = "chat_updated"
WS_EVENT_CHAT_UNREAD_UPDATED = "chat_unread_updated"
WS_EVENT_USER_ONLINE_UPDATED = "user_online_updated"
WS_EVENT_USER_JOINED = "user_joined_chat"
WS_EVENT_USER_LEAVE = "user_left_chat"
WS_EVENT_USER_UPDATED = "user_updated"
WS_EVENT_CUSTOMER_UPDATED = "customer_updated"
WS_EVENT_BOT_UPDATED = "bot_updated"
WS_EVENT_CHANNEL_UPDATED = "channel_updated"
WS_EVENT_SETTINGS_UPDATED = "settings_updated"
WS_EVENT_CHATS_DELETED = "chats_deleted"

WS_OPTION_INCLUDE_MASS_COMMUNICATION = "include_mass_communication"
