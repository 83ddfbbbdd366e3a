"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one socket read into a typed HTTPRequest.

=============================================================================
WHAT WE PARSE (AND WHAT WE DON'T)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    PUT /users/7 HTTP/1.1\r\n          ← request line                │
    │    ─┬─ ────┬─── ────┬───                                            │
    │     │      │        │                                               │
    │   method  path    version                                           │
    │                                                                      │
    │    Host: localhost:8080\r\n            ← headers (kept, not used)   │
    │    Content-Type: application/json\r\n                               │
    │    \r\n                                ← FIRST blank line           │
    │    {"name": "Ann", "email": "a@x.com"} ← body                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The server reads ONE bounded chunk per connection (1024 bytes by
default). Whatever arrived in that chunk is the whole request:

- No Content-Length driven body reads, no chunked transfer decoding.
- Bytes are decoded as UTF-8 with errors="replace", so parsing never
  fails. A mangled request line simply produces a request that matches
  no route.
- The request target is kept verbatim. "/users/5?x=1" stays as-is and
  the id extracted from it ("5?x=1") is then rejected.

=============================================================================
ID EXTRACTION
=============================================================================

    "/users/42/anything"   split("/")   ["", "users", "42", "anything"]
                                                    ────
                                                  index 2 → "42"

    "/users"               split("/")   ["", "users"]
                                         (no index 2) → ""

The extracted text must then pass parse_id(), which rejects the empty
string, non-digits and values outside the 32-bit range of the store's
id column.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import re

from ..models import MIN_ID, MAX_ID


class InvalidIdError(ValueError):
    """Raised when the id segment of a path is not a usable integer."""


_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:   Request method exactly as sent ("GET", "POST", ...).
                  Empty string when the request line was empty.

        path:     Request target exactly as sent ("/users/5").
                  Empty string when missing.

        version:  Protocol token ("HTTP/1.1"), empty when missing.

        headers:  Lowercase header name → value. Parsed for logging and
                  debugging only, routing never looks at them.

        body:     Text after the first blank line (\\r\\n\\r\\n).
                  None when the request has no blank line at all,
                  "" when the blank line is the last thing received.

        raw:      The decoded request text.

    =========================================================================
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    raw: str = ""

    @property
    def request_line(self) -> str:
        """The request line rebuilt from its parts (for logging)."""
        return " ".join(part for part in (self.method, self.path, self.version) if part)

    @property
    def user_id(self) -> int:
        """
        The integer id addressed by this request's path.

        Raises:
            InvalidIdError: If the path has no id segment or it is not
                            a valid integer.
        """
        return parse_id(extract_id(self.path))


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    The parser is lenient by construction: every input, including
    random binary garbage, produces an HTTPRequest. Deciding whether
    the request makes sense is left to the router and the handlers.

    Usage:
        parser = RequestParser()
        request = parser.parse(b"GET /users HTTP/1.1\\r\\n\\r\\n")
        request.method  # "GET"
        request.path    # "/users"
    """

    HEADER_TERMINATOR = "\r\n\r\n"

    def parse(self, data: bytes) -> HTTPRequest:
        """
        Parse one request.

        =====================================================================
        PARSING ALGORITHM
        =====================================================================

        1. Decode bytes as UTF-8, replacing invalid sequences
        2. Split once at the first \\r\\n\\r\\n into head and body
        3. First line of the head is the request line
        4. Remaining head lines are headers

        =====================================================================

        Args:
            data: Bytes received from the client.

        Returns:
            Parsed HTTPRequest (never raises).
        """
        text = data.decode("utf-8", errors="replace")

        head, separator, rest = text.partition(self.HEADER_TERMINATOR)
        body = rest if separator else None

        lines = head.split("\r\n")
        method, path, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
            raw=text,
        )

    def _parse_request_line(self, line: str) -> tuple:
        """
        Split "METHOD SP TARGET SP VERSION" into its three parts.

        Splits on single spaces only, so "GET  /users" yields an empty
        target and will not be routed.
        """
        parts = line.split(" ", 2)
        parts += [""] * (3 - len(parts))
        method, path, version = parts
        return method, path, version.strip()

    def _parse_headers(self, lines: list) -> Dict[str, str]:
        """
        Parse "Name: value" lines into a lowercase-keyed dict.

        Malformed lines are skipped. Repeated headers are joined with
        ", " as RFC 7230 allows.
        """
        headers: Dict[str, str] = {}
        for line in lines:
            name, colon, value = line.partition(":")
            if not colon or not name.strip():
                continue
            name = name.strip().lower()
            value = value.strip()
            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value
        return headers


# =============================================================================
# ID HELPERS
# =============================================================================

def extract_id(path: str) -> str:
    """
    Return the third "/"-separated segment of path, cut at whitespace.

    Examples:
        extract_id("/users/5")         → "5"
        extract_id("/users/5/posts")   → "5"
        extract_id("/users/")          → ""
        extract_id("/users")           → ""
    """
    segments = path.split("/")
    if len(segments) < 3:
        return ""
    words = segments[2].split()
    return words[0] if words else ""


def parse_id(text: str) -> int:
    """
    Parse an id segment into an int.

    Raises:
        InvalidIdError: On empty input, anything that is not a plain
                        decimal integer, or a value outside the 32-bit
                        id range.
    """
    if not _ID_PATTERN.fullmatch(text):
        raise InvalidIdError(f"Invalid user id: {text!r}")

    value = int(text)
    if not MIN_ID <= value <= MAX_ID:
        raise InvalidIdError(f"User id out of range: {text}")
    return value

