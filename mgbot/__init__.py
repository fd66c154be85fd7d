"""MG bot API client -- pydantic models, service client, websocket events and exceptions.

The :class:`MgClient` class wraps every bot API endpoint with synchronous
methods.  :class:`~mgbot.events.WsEvent` decodes frames read from the event
stream whose URL and headers :meth:`MgClient.ws_meta` computes.

Usage::

    from mgbot import MgClient, APIException
    from mgbot.models import BotsRequest, MessageSendRequest
    from mgbot.events import WsEvent
"""

from mgbot.client import MgClient
from mgbot.events import EVENT_DATA_TYPES, WsEvent
from mgbot.exceptions import (
    APIException,
    ConfigurationError,
    DecodeError,
    MgBotError,
    ServerError,
    TransportError,
)

__all__ = [
    "MgClient",
    "WsEvent",
    "EVENT_DATA_TYPES",
    "MgBotError",
    "APIException",
    "ConfigurationError",
    "DecodeError",
    "ServerError",
    "TransportError",
]
