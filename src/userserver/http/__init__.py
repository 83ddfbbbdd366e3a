"""
=============================================================================
HTTP PROTOCOL PACKAGE
=============================================================================

The HTTP/1.1 subset the user API speaks:

    request.py       Raw bytes → HTTPRequest, id extraction
    response.py      HTTPResponse, ResponseBuilder, helper constructors
    router.py        Ordered (method, path prefix) → handler table
    status_codes.py  The three status codes used on the wire

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestParser,
    InvalidIdError,
    extract_id,
    parse_id,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,              # 200 OK, text body
    ok_json,         # 200 OK, JSON body
    not_found,       # 404 NOT FOUND
    internal_error,  # 500 INTERNAL SERVER ERROR
)
from .router import Router, Route
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "InvalidIdError",
    "extract_id",
    "parse_id",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "ok_json",
    "not_found",
    "internal_error",

    # Routing
    "Router",
    "Route",

    # Status codes
    "HTTPStatus",
]
