"""MgClient -- service layer wrapping every MG bot API endpoint.

Requests are pydantic models from :mod:`mgbot.models`; responses are
validated into pydantic models before they are returned.  HTTP calls go
through one pooled :class:`requests.Session` per client.

Every call follows the same pipeline:

1. the request model encodes itself as a query string or a JSON body;
2. :meth:`MgClient._make_request` performs the call and returns
   ``(body, status)``, raising :class:`TransportError` or
   :class:`ServerError` on its own;
3. :meth:`MgClient._decode` parses the JSON, raises
   :class:`APIException` when the status is outside the endpoint's success
   range, and validates the payload otherwise.

Nothing is retried.
"""

from __future__ import annotations

import json
import logging
from typing import IO, Any, Container, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urlsplit, urlunsplit

import requests
from pydantic import TypeAdapter, ValidationError

from mgbot.constants import API_PREFIX, CONTENT_TYPE_JSON, DEFAULT_TIMEOUT, TOKEN_HEADER
from mgbot.exceptions import (
    APIException,
    ConfigurationError,
    DecodeError,
    ServerError,
    TransportError,
)
from mgbot.models import (
    BaseRequest,
    BotsRequest,
    BotsResponseItem,
    ChannelResponseItem,
    ChannelsRequest,
    ChatResponseItem,
    ChatsRequest,
    CommandEditRequest,
    CommandsRequest,
    CommandsResponseItem,
    CustomersRequest,
    CustomersResponseItem,
    DialogAssignRequest,
    DialogAssignResponse,
    DialogResponseItem,
    DialogsRequest,
    DialogTagsAddRequest,
    DialogTagsDeleteRequest,
    DialogUnassignResponse,
    ErrorResponse,
    FullFileResponse,
    InfoRequest,
    MemberResponseItem,
    MembersRequest,
    Message,
    MessageEditRequest,
    MessageSendRequest,
    MessageSendResponse,
    MessagesRequest,
    UpdateFileMetadataRequest,
    UploadFileByUrlRequest,
    UploadFileResponse,
    UsersRequest,
    UsersResponseItem,
)

Body = Union[bytes, IO[bytes]]

_OK_OR_CREATED: Container[int] = range(200, 202)
_OK_ONLY: Container[int] = (200,)

_WS_SCHEMES: Dict[str, str] = {"https": "wss", "http": "ws"}


def _printable(body: Optional[Body]) -> str:
    if not body:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return "<stream>"


def _with_query(path: str, request: BaseRequest) -> str:
    query = request.to_query()
    return f"{path}?{query}" if query else path


class MgClient:
    """Client-side service layer for the MG bot API.

    Each public method corresponds to one API endpoint.  Rejected calls raise
    :class:`APIException` whose message is the first entry of the response's
    ``errors`` array and whose ``status_code`` is the HTTP status.

    Example::

        client = MgClient("https://mg-s1.example.com", "bot-token")
        for bot in client.bots(BotsRequest(active=True)):
            print(bot.name, bot.created_at)
    """

    _DEFAULT_TIMEOUT: int = DEFAULT_TIMEOUT

    def __init__(
        self,
        url: str,
        token: str,
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
        timeout: float = _DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Create a new client bound to *url*.

        Args:
            url: Account base URL (e.g. ``https://mg-s1.example.com``).
            token: Bot token sent in the ``X-Bot-Token`` header.
            debug: Log every request and response through *logger*.
            logger: Logger for debug output, written at INFO.  Without one, the
                ``mgbot.client`` logger is used at WARNING so the output shows up
                even when the application never configured logging.
            timeout: Timeout in seconds applied to every request.
            session: Pre-configured session to share a connection pool.

        Raises:
            ConfigurationError: If *url* or *token* is empty.
        """
        if not url:
            raise ConfigurationError("url must not be empty")
        if not token:
            raise ConfigurationError("token must not be empty")
        self._base_url = url.rstrip("/")
        self._token = token
        self.debug = debug
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._debug_level = logging.INFO if logger is not None else logging.WARNING
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

    @classmethod
    def from_env(cls) -> "MgClient":
        """Build a client from the ``MG_BOT_*`` settings in :mod:`config`."""
        from config import MG_BOT_DEBUG, MG_BOT_TIMEOUT, MG_BOT_TOKEN, MG_BOT_URL  # deferred: loads .env
        from core.logger import MgBotLogger

        return cls(
            MG_BOT_URL or "",
            MG_BOT_TOKEN or "",
            debug=MG_BOT_DEBUG,
            logger=MgBotLogger.get_logger(),
            timeout=MG_BOT_TIMEOUT,
        )

    @property
    def url(self) -> str:
        return self._base_url

    @property
    def token(self) -> str:
        return self._token

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def __enter__(self) -> "MgClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    #  Transport
    # ------------------------------------------------------------------

    def _write_log(self, msg: str, *args: object, **extra: object) -> None:
        if self._debug_level == logging.INFO:
            self._logger.info(msg, *args, extra=extra)
        else:
            self._logger.warning(msg, *args, extra=extra)

    def _make_request(self, method: str, path: str, body: Optional[Body] = None) -> Tuple[bytes, int]:
        """Send one request and return the raw body with its status code.

        Statuses below 500 are returned as-is; interpreting them is the
        caller's job.

        Raises:
            TransportError: If no response was received or the body could not be read.
            ServerError: If the status code is 500 or above.
        """
        url = f"{self._base_url}{API_PREFIX}{path}"
        headers = {"Content-Type": CONTENT_TYPE_JSON, TOKEN_HEADER: self._token}

        if self.debug:
            self._write_log(
                "MG BOT API Request: %s %s %s %s",
                method, url, self._token, _printable(body),
                http_method=method, url=url, bot_token=self._token, request_body=_printable(body),
            )

        try:
            response = self._session.request(
                method, url, data=body or None, headers=headers, timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            status = response.status_code
            data = response.content
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed while reading the body: {exc}") from exc
        finally:
            response.close()

        if status >= 500:
            raise ServerError(status, data)

        if self.debug:
            self._write_log(
                "MG BOT API Response: %s",
                _printable(data),
                status_code=status, response_body=_printable(data),
            )

        return data, status

    def _get(self, path: str) -> Tuple[bytes, int]:
        return self._make_request("GET", path)

    def _post(self, path: str, body: Optional[Body] = None) -> Tuple[bytes, int]:
        return self._make_request("POST", path, body)

    def _patch(self, path: str, body: Optional[Body] = None) -> Tuple[bytes, int]:
        return self._make_request("PATCH", path, body)

    def _put(self, path: str, body: Optional[Body] = None) -> Tuple[bytes, int]:
        return self._make_request("PUT", path, body)

    def _delete(self, path: str) -> Tuple[bytes, int]:
        return self._make_request("DELETE", path)

    # ------------------------------------------------------------------
    #  Response classification
    # ------------------------------------------------------------------

    def _decode(
        self,
        data: bytes,
        status: int,
        response_type: Any,
        success: Container[int] = _OK_OR_CREATED,
    ) -> Any:
        """Turn a raw response into *response_type* or raise the matching error.

        The body is parsed as JSON before the status is looked at, so a
        non-JSON body is always reported as :class:`DecodeError`.

        Raises:
            DecodeError: If the body is not JSON or does not match the expected shape.
            APIException: If *status* is outside *success*.
        """
        try:
            parsed = json.loads(data)
        except ValueError as exc:
            raise DecodeError(f"response is not valid JSON: {exc}", status, data) from exc

        if status not in success:
            raise self._error(parsed, status, data)

        try:
            return TypeAdapter(response_type).validate_python(parsed)
        except ValidationError as exc:
            raise DecodeError(f"unexpected response shape: {exc}", status, data) from exc

    def _error(self, parsed: Any, status: int, data: bytes) -> APIException:
        try:
            envelope = ErrorResponse.model_validate(parsed)
        except ValidationError as exc:
            raise DecodeError(f"unexpected error response: {exc}", status, data) from exc
        return APIException(status, envelope.errors)

    # ------------------------------------------------------------------
    #  Bots, channels, users, customers
    # ------------------------------------------------------------------

    def bots(self, request: Optional[BotsRequest] = None) -> List[BotsResponseItem]:
        """List bots of the account."""
        request = request or BotsRequest()
        data, status = self._get(_with_query("/bots", request))
        return self._decode(data, status, List[BotsResponseItem])

    def channels(self, request: Optional[ChannelsRequest] = None) -> List[ChannelResponseItem]:
        """List connected channels together with their capability settings."""
        request = request or ChannelsRequest()
        data, status = self._get(_with_query("/channels", request))
        return self._decode(data, status, List[ChannelResponseItem])

    def users(self, request: Optional[UsersRequest] = None) -> List[UsersResponseItem]:
        """List operators (system users)."""
        request = request or UsersRequest()
        data, status = self._get(_with_query("/users", request))
        return self._decode(data, status, List[UsersResponseItem])

    def customers(self, request: Optional[CustomersRequest] = None) -> List[CustomersResponseItem]:
        request = request or CustomersRequest()
        data, status = self._get(_with_query("/customers", request))
        return self._decode(data, status, List[CustomersResponseItem])

    # ------------------------------------------------------------------
    #  Chats, members, dialogs
    # ------------------------------------------------------------------

    def chats(self, request: Optional[ChatsRequest] = None) -> List[ChatResponseItem]:
        request = request or ChatsRequest()
        data, status = self._get(_with_query("/chats", request))
        return self._decode(data, status, List[ChatResponseItem])

    def members(self, request: Optional[MembersRequest] = None) -> List[MemberResponseItem]:
        request = request or MembersRequest()
        data, status = self._get(_with_query("/members", request))
        return self._decode(data, status, List[MemberResponseItem])

    def dialogs(self, request: Optional[DialogsRequest] = None) -> List[DialogResponseItem]:
        request = request or DialogsRequest()
        data, status = self._get(_with_query("/dialogs", request))
        return self._decode(data, status, List[DialogResponseItem])

    def dialog_assign(self, request: DialogAssignRequest) -> DialogAssignResponse:
        """Make a user or a bot responsible for the dialog."""
        data, status = self._patch(f"/dialogs/{request.dialog_id}/assign", request.to_body())
        return self._decode(data, status, DialogAssignResponse)

    def dialog_unassign(self, dialog_id: int) -> DialogUnassignResponse:
        """Remove the responsible from the dialog.

        Fails with 400 when the dialog is not assigned or is not the latest in
        its chat, and with 404 when it does not exist.
        """
        data, status = self._patch(f"/dialogs/{dialog_id}/unassign")
        return self._decode(data, status, DialogUnassignResponse, _OK_ONLY)

    def dialog_close(self, dialog_id: int) -> Dict[str, Any]:
        data, status = self._delete(f"/dialogs/{dialog_id}/close")
        return self._decode(data, status, Dict[str, Any])

    def dialog_tags_add(self, request: DialogTagsAddRequest) -> Dict[str, Any]:
        """Attach tags to the dialog, optionally with a colour code."""
        data, status = self._patch(f"/dialogs/{request.dialog_id}/tags/add", request.to_body())
        return self._decode(data, status, Dict[str, Any])

    def dialog_tags_delete(self, request: DialogTagsDeleteRequest) -> Dict[str, Any]:
        data, status = self._patch(f"/dialogs/{request.dialog_id}/tags/delete", request.to_body())
        return self._decode(data, status, Dict[str, Any])

    # ------------------------------------------------------------------
    #  Messages
    # ------------------------------------------------------------------

    def messages(self, request: Optional[MessagesRequest] = None) -> List[Message]:
        """List messages; each item is the :data:`~mgbot.models.Message` variant for its type."""
        request = request or MessagesRequest()
        data, status = self._get(_with_query("/messages", request))
        return self._decode(data, status, List[Message])

    def message_send(self, request: MessageSendRequest) -> MessageSendResponse:
        """Send a text, product, order, file or image message to a chat."""
        data, status = self._post("/messages", request.to_body())
        return self._decode(data, status, MessageSendResponse)

    def message_edit(self, request: MessageEditRequest) -> Dict[str, Any]:
        data, status = self._patch(f"/messages/{request.id}", request.to_body())
        return self._decode(data, status, Dict[str, Any])

    def message_delete(self, message_id: int) -> Dict[str, Any]:
        data, status = self._delete(f"/messages/{message_id}")
        return self._decode(data, status, Dict[str, Any])

    # ------------------------------------------------------------------
    #  Bot profile and commands
    # ------------------------------------------------------------------

    def info(self, request: InfoRequest) -> Dict[str, Any]:
        """Update the bot's name, avatar or roles."""
        data, status = self._patch("/my/info", request.to_body())
        return self._decode(data, status, Dict[str, Any])

    def commands(self, request: Optional[CommandsRequest] = None) -> List[CommandsResponseItem]:
        request = request or CommandsRequest()
        data, status = self._get(_with_query("/my/commands", request))
        return self._decode(data, status, List[CommandsResponseItem])

    def command_edit(self, request: CommandEditRequest) -> CommandsResponseItem:
        """Create the command, or replace it if one with the same name exists."""
        data, status = self._put(f"/my/commands/{quote(request.name, safe='')}", request.to_body())
        return self._decode(data, status, CommandsResponseItem)

    def command_delete(self, name: str) -> Dict[str, Any]:
        data, status = self._delete(f"/my/commands/{quote(name, safe='')}")
        return self._decode(data, status, Dict[str, Any])

    # ------------------------------------------------------------------
    #  Files
    # ------------------------------------------------------------------

    def get_file(self, file_id: str) -> FullFileResponse:
        """Resolve a file id to its download URL."""
        data, status = self._get(f"/files/{quote(file_id, safe='')}")
        return self._decode(data, status, FullFileResponse, _OK_ONLY)

    def upload_file(self, content: Body) -> UploadFileResponse:
        """Upload raw file content (bytes or a binary stream)."""
        data, status = self._post("/files/upload", content)
        return self._decode(data, status, UploadFileResponse, _OK_ONLY)

    def upload_file_by_url(self, request: UploadFileByUrlRequest) -> UploadFileResponse:
        """Let the API download a file from a public URL."""
        data, status = self._post("/files/upload_by_url", request.to_body())
        return self._decode(data, status, UploadFileResponse, _OK_ONLY)

    def update_file_metadata(self, request: UpdateFileMetadataRequest) -> UploadFileResponse:
        """Store a transcription (and its status) for an uploaded file."""
        data, status = self._put(f"/files/{quote(request.id, safe='')}/meta", request.to_body())
        return self._decode(data, status, UploadFileResponse, _OK_ONLY)

    # ------------------------------------------------------------------
    #  Websocket
    # ------------------------------------------------------------------

    def ws_meta(self, events: Sequence[str], options: Optional[Sequence[str]] = None) -> Tuple[str, Dict[str, str]]:
        """Return the URL and headers needed to open the event stream.

        No connection is made.  The token travels as a header, never in the URL.

        Args:
            events: Event names to subscribe to (see ``WS_EVENT_*`` constants).
            options: Extra stream options such as ``include_mass_communication``.

        Raises:
            ConfigurationError: If *events* is empty or no websocket URL can be
                derived from the base URL.
        """
        if not events:
            raise ConfigurationError("events list must not be empty")

        parts = urlsplit(self._base_url)
        scheme = _WS_SCHEMES.get(parts.scheme)
        if scheme is None or not parts.netloc:
            raise ConfigurationError("empty WS URL")

        base = urlunsplit((scheme, parts.netloc, parts.path, "", ""))
        url = f"{base}{API_PREFIX}/ws?events={','.join(events)}"
        if options:
            url += f"&options={','.join(options)}"

        return url, {TOKEN_HEADER: self._token}
