"""
=============================================================================
HTTP RESPONSE
=============================================================================

HTTPResponse is a plain container: status, an ordered header mapping and an
optional body. Handlers build one, middleware may rewrite it (compression
swaps the body), and the connection loop serializes it last.

=============================================================================
SERIALIZATION
=============================================================================

    HTTP/1.1 200 OK\r\n                    ← status line
    Content-Type: text/plain\r\n           ← headers, insertion order
    Content-Encoding: gzip\r\n
    Content-Length: 23\r\n                 ← added by to_bytes(), only if
    \r\n                                     there is a body
    <23 body bytes>

Content-Length is computed in to_bytes() and nowhere else. Anything that
runs before serialization (gzip in particular) may still change the body,
so a length set earlier would be wrong.

A response with body=None has no body at all: no Content-Length, nothing
after the blank line. body=b"" is an empty body and does get
"Content-Length: 0".

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Union

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use ResponseBuilder or the helpers at the bottom of this module to
    construct one.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def has_body(self) -> bool:
        return self.body is not None

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Set a response header.

        Returns self for method chaining:
            response.set_header("Connection", "close").set_header(...)
        """
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes, None]) -> "HTTPResponse":
        """Set the response body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

        Returns:
            Complete HTTP response ready for socket.sendall().
        """
        # Copy headers to avoid modifying original
        response_headers = dict(self.headers)

        # Always recomputed here, after every body rewrite has happened
        response_headers.pop("Content-Length", None)
        if self.body is not None:
            response_headers["Content-Length"] = str(len(self.body))

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + (self.body or b"")


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns `self`, so calls chain:

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("hello")
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add a single response header."""
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body (raw bytes or string).

        For text use text(), which also sets Content-Type.
        """
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str, content_type: str = "text/plain") -> "ResponseBuilder":
        """Set a plain text body (UTF-8) and its Content-Type."""
        self._headers["Content-Type"] = content_type
        self._body = text.encode("utf-8")
        return self

    def binary(self, data: bytes) -> "ResponseBuilder":
        """Set an opaque byte body served as application/octet-stream."""
        self._headers["Content-Type"] = "application/octet-stream"
        self._body = data
        return self

    def close_connection(self) -> "ResponseBuilder":
        """
        Set Connection: close header.

        Tells the client we close the connection after this response.
        """
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for the responses handlers actually return:
#
#     return ok()                 # 200, no body
#     return ok("hello")          # 200, text/plain body
#     return created()            # 201, no body
#     return not_found()          # 404, no body
#
# =============================================================================

def ok(body: Union[str, bytes, None] = None, content_type: Optional[str] = None) -> HTTPResponse:
    """
    Create a 200 OK response.

    - None  → no body, no Content-Type
    - str   → text/plain body (unless content_type overrides)
    - bytes → raw body, Content-Type only if given
    """
    builder = ResponseBuilder().status(HTTPStatus.OK)

    if isinstance(body, str):
        builder.text(body, content_type or "text/plain")
    elif body is not None:
        builder.body(body)
        if content_type:
            builder.content_type(content_type)

    return builder.build()


def created() -> HTTPResponse:
    """Create a 201 Created response with no body."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response with no body."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def internal_error() -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    Always carries Connection: close; after a handler blew up we don't
    trust the connection for another request.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .close_connection()
        .build())
