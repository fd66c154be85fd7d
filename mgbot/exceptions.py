"""Exception hierarchy for the MG bot API client."""

from typing import List, Optional


class MgBotError(Exception):
    """Base class for every error raised by :mod:`mgbot`.

    Attributes:
        status_code: HTTP status code, or ``None`` when no response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransportError(MgBotError):
    """The request never produced an HTTP response (DNS, connection, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=None)


class ServerError(MgBotError):
    """The API answered with a 5xx status; the body is not interpreted."""

    def __init__(self, status_code: int, body: bytes = b"") -> None:
        self.body = body
        super().__init__(f"http request error. Status code: {status_code}", status_code)


class APIException(MgBotError):
    """The API rejected the call and explained why in its ``errors`` array.

    Only the first entry is used as the exception message; the full list is
    kept in :attr:`errors`.

    Attributes:
        status_code: HTTP status code returned by the API.
        errors: Every message from the response body.
    """

    def __init__(self, status_code: int, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__(self.errors[0], status_code)


class DecodeError(MgBotError):
    """A response body could not be understood (bad JSON or unexpected shape)."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: bytes = b"") -> None:
        self.body = body
        super().__init__(message, status_code)


class ConfigurationError(MgBotError):
    """The client or a websocket request was configured with unusable values."""
