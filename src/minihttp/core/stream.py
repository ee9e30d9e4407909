"""
=============================================================================
BYTE STREAM: EXACT READS AND LINES OVER A PARTIAL DELIVERY SOCKET
=============================================================================

TCP hands us bytes in whatever chunks the network produced. A request line
may arrive as "GE", "T / HT", "TP/1.1\r\n" in three separate recv() calls,
and a POST body may trickle in long after its headers.

ByteStream hides that. It sits on top of any "give me up to N bytes"
callable (socket.recv, BytesIO.read, a test fake) and offers two reads:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ByteStream API                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   read(n)       Exactly n bytes, assembled across deliveries.       │
    │                 Fewer only if the peer closed first.                │
    │                                                                     │
    │   read_line()   Next line, "\r\n" stripped.                         │
    │                 ""    → a genuine blank line                        │
    │                 None  → peer closed before sending anything         │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Both calls block the calling thread until enough data has arrived. Every
connection owns its own thread, so a slow client only ever stalls itself.

=============================================================================
WHY NONE AND NOT ""?
=============================================================================

The header section ends at the first empty line, and the parser stops
there whether the empty line came from the client or from a closed
socket. Keeping end-of-stream as None lets the parser treat both the same
way where it wants to ("if not line") while still being able to tell them
apart where it matters (logging, the request line).

=============================================================================
"""

import logging
from typing import Callable, Optional


logger = logging.getLogger(__name__)


# A receiver returns up to `n` bytes, or b"" once the peer has closed.
Receiver = Callable[[int], bytes]


class ByteStream:
    """
    Buffered reader over a raw receiver.

    Attributes:
        buffer_size: Upper bound passed to the receiver on each call.
    """

    def __init__(self, recv: Receiver, buffer_size: int = 4096):
        self._recv = recv
        self.buffer_size = buffer_size
        self._buffer = bytearray()
        self._eof = False

    @property
    def closed(self) -> bool:
        """True once the receiver has reported end of input."""
        return self._eof

    @property
    def buffered(self) -> int:
        """Number of bytes received but not yet consumed."""
        return len(self._buffer)

    def _fill(self) -> bool:
        """
        Pull one delivery from the receiver into the buffer.

        Returns:
            False if the stream is (now) at end of input.
        """
        if self._eof:
            return False

        chunk = self._recv(self.buffer_size)
        if not chunk:
            self._eof = True
            return False

        self._buffer += chunk
        return True

    def read(self, n: int) -> bytes:
        """
        Read exactly `n` bytes.

        Blocks until `n` bytes are buffered or the peer closes. In the
        latter case whatever did arrive is returned, possibly b"".

        Args:
            n: Number of bytes wanted. Zero or negative reads nothing.

        Returns:
            The bytes read.
        """
        if n <= 0:
            return b""

        while len(self._buffer) < n:
            if not self._fill():
                break

        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data

    def read_line(self) -> Optional[str]:
        """
        Read one line terminated by "\\n".

        The terminator and a preceding "\\r" are removed. A final line with
        no terminator (peer closed mid-line) is returned as-is.

        Returns:
            The decoded line, "" for a blank line, or None if the peer
            closed before any byte of this line arrived.
        """
        searched = 0
        while True:
            end = self._buffer.find(b"\n", searched)
            if end != -1:
                break
            searched = len(self._buffer)
            if not self._fill():
                break

        if end == -1:
            if not self._buffer:
                return None
            raw = bytes(self._buffer)
            self._buffer.clear()
        else:
            raw = bytes(self._buffer[:end])
            del self._buffer[:end + 1]

        if raw.endswith(b"\r"):
            raw = raw[:-1]

        # Header text is ASCII in practice; never let a stray byte kill the connection
        return raw.decode("utf-8", errors="replace")
