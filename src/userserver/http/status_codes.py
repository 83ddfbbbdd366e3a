"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The user API answers with exactly three status lines:

    ┌────────┬──────────────────────────┬──────────────────────────────────┐
    │  Code  │  Reason phrase on wire   │  Used for                        │
    ├────────┼──────────────────────────┼──────────────────────────────────┤
    │  200   │  OK                      │  Every successful operation      │
    │  404   │  NOT FOUND               │  Unknown route, delete miss      │
    │  500   │  INTERNAL SERVER ERROR   │  Bad id/body, store failures,    │
    │        │                          │  single-user read miss           │
    └────────┴──────────────────────────┴──────────────────────────────────┘

Reason phrases are written in upper case. Clients must not depend on the
phrase (RFC 7230 section 3.1.2), but the status line is part of the wire
contract of this server, so it is kept byte-for-byte stable.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes emitted by the server.

    Extends IntEnum so codes compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'NOT FOUND'
    """

    OK = 200                        # Operation succeeded
    NOT_FOUND = 404                 # No route, or nothing to delete
    INTERNAL_SERVER_ERROR = 500     # Generic failure (input or store)

    @property
    def phrase(self) -> str:
        """Reason phrase written after the code in the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "NOT FOUND",
    HTTPStatus.INTERNAL_SERVER_ERROR: "INTERNAL SERVER ERROR",
}
