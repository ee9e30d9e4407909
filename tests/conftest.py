"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator, List

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.core.stream import ByteStream
from minihttp.handlers import FileStorage


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /echo/abc HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"hello world"
    return (
        b"POST /files/notes.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


def chunked_receiver(chunks: List[bytes]) -> Callable[[int], bytes]:
    """
    A fake recv() that hands out pre-cut deliveries, then b"" forever.

    Each call returns at most `n` bytes of the current chunk, so a chunk
    larger than the buffer size is itself split across calls.
    """
    pending = [bytes(chunk) for chunk in chunks if chunk]

    def recv(n: int) -> bytes:
        if not pending:
            return b""
        head = pending[0]
        data, rest = head[:n], head[n:]
        if rest:
            pending[0] = rest
        else:
            pending.pop(0)
        return data

    return recv


@pytest.fixture
def make_stream() -> Callable[..., ByteStream]:
    """Build a ByteStream over a list of deliveries."""
    def factory(*chunks: bytes, buffer_size: int = 4096) -> ByteStream:
        return ByteStream(chunked_receiver(list(chunks)), buffer_size)
    return factory


@pytest.fixture
def storage(tmp_path: Path) -> FileStorage:
    """A FileStorage rooted in a fresh temporary directory."""
    return FileStorage(tmp_path / "files")


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def connect(self) -> socket.socket:
        """Open a raw client socket to the server."""
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=5.0)
        return sock


@pytest.fixture
def test_server(tmp_path: Path) -> Generator[TestServer, None, None]:
    """A running server on a free port, storing files under tmp_path."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        directory=str(tmp_path / "data"),
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
