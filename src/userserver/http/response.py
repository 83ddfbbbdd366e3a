"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them to bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                      ← status line           │
    │    Content-Type: application/json\r\n       ← only for JSON bodies  │
    │    Content-Length: 41\r\n                   ← auto-added            │
    │    Date: Sun, 18 Oct 2026 12:00:00 GMT\r\n  ← auto-added            │
    │    Server: UserServer/1.0\r\n               ← auto-added            │
    │    Connection: close\r\n                    ← one request per conn  │
    │    \r\n                                                              │
    │    {"id":1,"name":"Ann","email":"ann@x.com"}                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Handlers produce a (status, body) pair. HTTPResponse is that pair plus
the headers; ResponseBuilder is the fluent way to put one together:

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .json_text('{"id":1}')
        .build())

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict

from .status_codes import HTTPStatus


JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass
class HTTPResponse:
    """
    An HTTP response waiting to be written to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE

        Example: "HTTP/1.1 404 NOT FOUND"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "UserServer/1.0") -> bytes:
        """
        Serialize the response for socket.sendall().

        Content-Length, Date and Server are filled in unless the
        handler already set them.

        Args:
            server_name: Value for the Server header.

        Returns:
            Status line, headers, blank line and body as bytes.
        """
        response_headers = dict(self.headers)

        # Content-Length: the client knows where the body ends even
        # before we close the socket
        response_headers.setdefault("Content-Length", str(len(self.body)))
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Each method returns self so calls can be chained; build() returns
    the finished HTTPResponse.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    # =========================================================================
    # STATUS & HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY
    # =========================================================================

    def text(self, text: str) -> "ResponseBuilder":
        """Plain text body (confirmation and error messages)."""
        self._body = text.encode("utf-8")
        return self.content_type(TEXT_CONTENT_TYPE)

    def json_text(self, document: str) -> "ResponseBuilder":
        """
        Body that is already a JSON document.

        Serialization is the codec's job; the builder only labels the
        body as JSON.
        """
        self._body = document.encode("utf-8")
        return self.content_type(JSON_CONTENT_TYPE)

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Example: Sun, 18 Oct 2026 12:00:00 GMT

    HTTP dates are always GMT, never local time.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses handlers actually return:
#
#     return ok_json(encode_user(user))
#     return ok("User created")
#     return not_found("User not found")
#     return internal_error()
#
# =============================================================================

def ok(message: str = "") -> HTTPResponse:
    """200 OK with a plain text message."""
    return ResponseBuilder().status(HTTPStatus.OK).text(message).build()


def ok_json(document: str) -> HTTPResponse:
    """200 OK with a JSON body and Content-Type: application/json."""
    return ResponseBuilder().status(HTTPStatus.OK).json_text(document).build()


def not_found(message: str = "") -> HTTPResponse:
    """
    404 NOT FOUND.

    Unrouted requests get an empty body with no Content-Type; handlers
    pass a message.
    """
    builder = ResponseBuilder().status(HTTPStatus.NOT_FOUND)
    if message:
        builder.text(message)
    return builder.build()


def internal_error(message: str = "Internal error") -> HTTPResponse:
    """
    500 INTERNAL SERVER ERROR.

    Keep the message generic: the client is never told whether the id,
    the body or the store was at fault.
    """
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).text(message).build()
