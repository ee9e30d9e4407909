"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Builds HTTPRequest objects by pulling lines and bytes from a ByteStream,
one request at a time. The parser never sees "the whole request" up front:
it reads the request line, then header lines until the first empty one,
then exactly Content-Length body bytes for POST.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  POST /files/notes.txt HTTP/1.1\r\n        ← request line            │
    │  ──┬─ ─────────┬────── ────┬───                                      │
    │  Method       Path       Version (not validated)                     │
    │                                                                      │
    │  Host: localhost:4221\r\n                  ← headers, split on ": "  │
    │  Content-Length: 5\r\n                       name lower-cased        │
    │  \r\n                                      ← first empty line ends   │
    │                                              the header section      │
    │  hello                                     ← exactly 5 body bytes    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
LENIENT PARSING
=============================================================================

Nothing a client sends can make the parser raise:

    - "GET"                    → path "" and version ""
    - "Content-Length: abc"    → body length 0
    - "X-Broken-Header"        → line skipped
    - socket closed mid-body   → body holds whatever arrived

The only distinct outcome is "no request at all" (the client closed the
connection, or sent an empty request line), which parse() reports as None
so the connection loop can stop.

=============================================================================
"""

import io
from dataclasses import dataclass, field
from typing import Callable, Optional, Dict

from ..core.stream import ByteStream


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    Attributes:
        method:         Request method as sent ("GET", "POST", ...).
        path:           Request target, not decoded ("/echo/abc").
        version:        Version string as sent, never validated.
        headers:        Header values keyed by LOWERCASE name. A repeated
                        header keeps its last value.
        body:           Body bytes. Only ever filled for POST.
        path_params:    Captures injected by the router ("/echo/*text").
        client_address: (ip, port) of the peer, for logging.
        connection_id:  Id of the connection that carried the request.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    path_params: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)
    connection_id: int = 0

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def content_length(self) -> int:
        """
        Content-Length as an integer.

        Only plain ASCII digits count. Missing, signed or otherwise
        non-numeric values ("-4", "+5", "1_0", "1.5") are 0.
        """
        value = self.headers.get("content-length", "").strip()
        if not (value.isascii() and value.isdigit()):
            return 0
        return int(value)

    @property
    def user_agent(self) -> str:
        """User-Agent header value, "" when absent."""
        return self.headers.get("user-agent", "")

    @property
    def accepted_encodings(self) -> list[str]:
        """
        Accept-Encoding as a list of tokens, in the order sent.

            "deflate , gzip"  →  ["deflate", "gzip"]
        """
        header = self.headers.get("accept-encoding", "")
        return [token.strip() for token in header.split(",") if token.strip()]

    @property
    def wants_close(self) -> bool:
        """True if the client asked to close the connection after this response."""
        return self.headers.get("connection", "").strip() == "close"

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value (case-insensitive lookup).

        Example:
            request.get_header("User-Agent")  # works, keys are stored lowercase
        """
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Reads HTTPRequest objects off a ByteStream.

    One parser can be shared by every connection; it holds no per-request
    state.
    """

    # Methods whose body we read (Content-Length bytes)
    BODY_METHODS = frozenset({"POST"})

    def parse(
        self,
        stream: ByteStream,
        client_address: tuple[str, int] = ("", 0),
        connection_id: int = 0,
        on_request_line: Optional[Callable[[], None]] = None,
    ) -> Optional[HTTPRequest]:
        """
        Parse the next request from the stream.

        =====================================================================
        PARSING ALGORITHM
        =====================================================================

        1. Read the request line. Empty or end of stream → return None.
        2. Split it on single spaces into method, path, version.
        3. Read header lines until the first empty line.
        4. For POST, read exactly Content-Length body bytes.

        =====================================================================

        Args:
            stream: Source of request bytes.
            client_address: Client's (ip, port) tuple for logging.
            connection_id: Carrying connection, for logging.
            on_request_line: Called once a request line has arrived, before
                             the headers are read.

        Returns:
            The parsed request, or None if no request line was available.
        """
        request_line = stream.read_line()
        if not request_line:
            return None

        if on_request_line is not None:
            on_request_line()

        method, path, version = self._parse_request_line(request_line)
        headers = self._parse_headers(stream)

        request = HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            client_address=client_address,
            connection_id=connection_id,
        )

        if method in self.BODY_METHODS:
            request.body = stream.read(request.content_length)

        return request

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split "METHOD SP PATH SP VERSION" into its three parts.

        Missing parts come back as "". Tokens past the third are ignored.
        """
        parts = line.split(" ")
        method = parts[0]
        path = parts[1] if len(parts) > 1 else ""
        version = parts[2] if len(parts) > 2 else ""
        return method, path, version

    def _parse_headers(self, stream: ByteStream) -> Dict[str, str]:
        """
        Read "Name: Value" lines up to the first empty line.

        The first empty line ends the section whether it is the real
        CRLF separator or the peer hanging up mid-headers.
        """
        headers: Dict[str, str] = {}

        while True:
            line = stream.read_line()
            if not line:
                break

            name, separator, value = line.partition(": ")
            if not separator:
                continue  # Skip malformed headers (lenient parsing)

            headers[name.lower()] = value

        return headers


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
) -> Optional[HTTPRequest]:
    """
    Parse a single request from raw bytes.

    Handy in tests and tools; the server itself parses straight off the
    connection's stream.

    Args:
        data: Raw HTTP request bytes.
        client_address: Client's (ip, port) tuple.

    Returns:
        Parsed HTTPRequest, or None if `data` holds no request line.
    """
    stream = ByteStream(io.BytesIO(data).read)
    return RequestParser().parse(stream, client_address)
