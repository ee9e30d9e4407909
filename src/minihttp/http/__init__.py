"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Turns lines and bytes into requests, requests into responses, and
responses back into bytes.

    REQUEST:                          RESPONSE:
    ─────────                         ──────────
    GET /echo/abc HTTP/1.1\r\n        HTTP/1.1 200 OK\r\n
    User-Agent: curl/8.0\r\n          Content-Type: text/plain\r\n
    \r\n                              Content-Length: 3\r\n
                                      \r\n
                                      abc

=============================================================================
"""

from .request import HTTPRequest, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok,              # 200 OK
    created,         # 201 Created
    not_found,       # 404 Not Found
    internal_error,  # 500 Internal Server Error
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "parse_request",
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "created",
    "not_found",
    "internal_error",
    "Router",
    "Route",
    "RouteMatch",
    "HTTPStatus",
]
