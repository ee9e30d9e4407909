"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

One Connection per accepted socket. It owns the live byte stream, a
diagnostic id and the lifecycle state, and nothing else: there is no
per-connection application state.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

    Client sends:
        "GET /echo/abc HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /ec"
        recv() → "ho/abc HTTP/1.1\r\nHo"
        recv() → "st: x\r\n\r\n"

The Connection never tries to guess where a request ends. It exposes a
ByteStream (see stream.py) and lets the request parser pull exactly the
lines and bytes it needs. Bytes left over after one request stay buffered
for the next one on the same connection.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    IDLE ──► PARSING ──► ROUTING ──► ENCODING ──► WRITING ──┐
     ▲          │                                           │
     │          │ no request line                           │
     │          ▼                                           │
     │       CLOSED ◄──────── Connection: close ────────────┤
     │                        or stream not open            │
     └──────────────────────── keep-alive ──────────────────┘

=============================================================================
"""

import socket
import logging
import threading
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional

from .stream import ByteStream


logger = logging.getLogger(__name__)


# Process-wide, monotonically increasing connection ids (diagnostics only)
_id_lock = threading.Lock()
_last_id = 0


def next_connection_id() -> int:
    """Return the next connection id."""
    global _last_id
    with _id_lock:
        _last_id += 1
        return _last_id


class ConnectionState(Enum):
    """Connection lifecycle states."""
    IDLE = "idle"            # Waiting for the next request line
    PARSING = "parsing"      # Reading headers and body
    ROUTING = "routing"      # Handler is executing
    ENCODING = "encoding"    # Content negotiation on the response body
    WRITING = "writing"      # Sending the serialized response
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Process-wide increasing identifier (for logging).
        state: Current connection state.
        requests_handled: Number of responses written on this connection.
        buffer_size: Maximum bytes per recv().
        timeout: Socket read timeout, None to wait forever.
        stream: Buffered ByteStream over the socket.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: int = field(default_factory=next_connection_id)
    state: ConnectionState = ConnectionState.IDLE
    requests_handled: int = 0

    buffer_size: int = 4096
    timeout: Optional[float] = None

    stream: ByteStream = field(init=False, repr=False)
    _send_failed: bool = field(default=False, repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        # settimeout(None) is blocking mode, which is what we want by default
        self.socket.settimeout(self.timeout)
        self.stream = ByteStream(self._recv, self.buffer_size)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def is_open(self) -> bool:
        """
        Whether another request can be read from this connection.

        False once we closed it, once the peer closed its side (observed
        as end of input on a read), or once a write failed.
        """
        return (
            self.state != ConnectionState.CLOSED
            and not self.stream.closed
            and not self._send_failed
        )

    # =========================================================================
    # READING
    # =========================================================================

    def _recv(self, size: int) -> bytes:
        """
        Receive up to `size` bytes from the socket.

        Socket failures are reported as end of input (b""): the peer is
        gone either way and there is nobody left to send an error to.
        """
        try:
            return self.socket.recv(size)
        except socket.timeout:
            logger.debug(f"[{self.id}] Read timed out")
            return b""
        except (ConnectionResetError, BrokenPipeError):
            logger.debug(f"[{self.id}] Connection reset by peer")
            return b""
        except OSError as e:
            logger.debug(f"[{self.id}] Read failed: {e}")
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a large body is not silently truncated.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.debug(f"[{self.id}] Send failed: {e}")
            self._send_failed = True
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) first so the client sees EOF right after the
        last response, then release the file descriptor. Safe to call
        more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
