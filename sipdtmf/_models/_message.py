"""
SIP Message models (Request and Response).

Lightweight carriers for the requests a tone event travels on and the
responses it is resolved by. Parsing raw SIP messages is left to the stack
that owns the transport.
"""

from __future__ import annotations

import typing

from .._utils import EOL, REASON_PHRASES, SCHEME, VERSION
from ._body import MessageBody
from ._header import Headers, HeaderTypes

Responder = typing.Callable[["Response"], None]


class SIPMessage:
    """Shared content handling for Request and Response."""

    __slots__ = ()

    _headers: Headers
    _content: bytes

    @property
    def headers(self) -> Headers:
        """Return the message headers."""
        return self._headers

    @property
    def content(self) -> bytes:
        """Return message content."""
        return self._content

    @content.setter
    def content(self, value: str | bytes | MessageBody | None) -> None:
        """Set message content and update Content-Length."""
        if isinstance(value, MessageBody):
            self._content = value.to_bytes()
            if "Content-Type" not in self._headers:
                self._headers["Content-Type"] = value.content_type
        elif isinstance(value, str):
            self._content = value.encode("utf-8")
        elif isinstance(value, bytes):
            self._content = value
        else:
            self._content = b""
        self._headers["Content-Length"] = str(len(self._content))

    @property
    def content_text(self) -> str:
        """Return content decoded as UTF-8 text."""
        return self._content.decode("utf-8", errors="replace")

    @property
    def content_type(self) -> str | None:
        """Return Content-Type header value."""
        return self._headers.get("Content-Type")

    @property
    def call_id(self) -> str | None:
        """Return Call-ID header."""
        return self._headers.get("Call-ID")

    @property
    def cseq(self) -> str | None:
        """Return CSeq header."""
        return self._headers.get("CSeq")

    def _start_line(self) -> str:
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        """Serialize message to bytes (wire format)."""
        head = self._start_line() + EOL
        return head.encode("utf-8") + self._headers.raw() + EOL.encode("utf-8") + self._content

    def __str__(self) -> str:
        return self.to_bytes().decode("utf-8", errors="replace")


class Request(SIPMessage):
    """
    SIP Request message.

    Inbound requests can be answered with ``reply``; the transport that
    received the request installs a ``responder`` to put the response on
    the wire.
    """

    __slots__ = ("method", "uri", "version", "_headers", "_content", "responder", "replies")

    def __init__(
        self,
        method: str,
        uri: str,
        *,
        headers: HeaderTypes | None = None,
        content: str | bytes | MessageBody | None = None,
        version: str | None = None,
        responder: Responder | None = None,
    ) -> None:
        self.method = method.upper()
        self.uri = uri
        self.version = version if version else f"{SCHEME}/{VERSION}"
        self._headers = headers if isinstance(headers, Headers) else Headers(headers)
        self.content = content
        self.responder = responder
        self.replies: list[Response] = []

        if "Max-Forwards" not in self._headers:
            self._headers["Max-Forwards"] = "70"

    def _start_line(self) -> str:
        return f"{self.method} {self.uri} {self.version}"

    def reply(self, status_code: int, reason_phrase: str | None = None) -> Response:
        """
        Answer this request.

        The response copies Via, From, To, Call-ID and CSeq from the request.

        Args:
            status_code: Response status code
            reason_phrase: Optional reason phrase (default from REASON_PHRASES)

        Returns:
            The response that was sent
        """
        headers = Headers()
        for name in ("Via", "From", "To", "Call-ID", "CSeq"):
            for value in self._headers.get_all(name):
                headers.add(name, value)

        response = Response(
            status_code,
            reason_phrase=reason_phrase,
            headers=headers,
            request=self,
        )
        self.replies.append(response)
        if self.responder is not None:
            self.responder(response)
        return response

    def __repr__(self) -> str:
        return f"<Request({self.method!r}, {self.uri!r})>"


class Response(SIPMessage):
    """
    SIP Response message.

    - 1xx: Provisional
    - 2xx: Success
    - 3xx-6xx: Redirection and failures
    """

    __slots__ = ("status_code", "version", "reason_phrase", "_headers", "_content", "request")

    def __init__(
        self,
        status_code: int,
        *,
        reason_phrase: str | None = None,
        headers: HeaderTypes | None = None,
        content: str | bytes | MessageBody | None = None,
        version: str | None = None,
        request: Request | None = None,
    ) -> None:
        self.status_code = status_code
        self.version = version if version else f"{SCHEME}/{VERSION}"
        self.reason_phrase = (
            reason_phrase
            if reason_phrase is not None
            else REASON_PHRASES.get(status_code, "Unknown")
        )
        self._headers = headers if isinstance(headers, Headers) else Headers(headers)
        self.content = content
        self.request = request

    def _start_line(self) -> str:
        return f"{self.version} {self.status_code} {self.reason_phrase}"

    @property
    def is_provisional(self) -> bool:
        """True if this is a 1xx provisional response."""
        return 100 <= self.status_code < 200

    @property
    def is_success(self) -> bool:
        """True if this is a 2xx success response."""
        return 200 <= self.status_code < 300

    @property
    def is_final(self) -> bool:
        """True if this is a final response (>= 200)."""
        return self.status_code >= 200

    def __repr__(self) -> str:
        return f"<Response [{self.status_code} {self.reason_phrase}]>"


__all__ = [
    "SIPMessage",
    "Request",
    "Response",
]
