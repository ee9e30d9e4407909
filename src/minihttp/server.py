"""
=============================================================================
HTTP SERVER
=============================================================================

Wires the pieces together and runs the per-connection loop.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         HTTPServer                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   SocketServer ── accept ──► Connection ── new thread ──┐           │
    │                                                         │           │
    │   ┌─────────────────────────────────────────────────────▼─────────┐ │
    │   │  _process_connection (one thread per connection)              │ │
    │   │                                                               │ │
    │   │    IDLE      wait for a request line                          │ │
    │   │    PARSING   RequestParser.parse: headers, body               │ │
    │   │    ROUTING   pipeline (LoggingMiddleware → router.handle)     │ │
    │   │    ENCODING  CompressionMiddleware.negotiate                  │ │
    │   │    WRITING   Connection: close?  → response.to_bytes()        │ │
    │   │    repeat, or CLOSED                                          │ │
    │   └───────────────────────────────────────────────────────────────┘ │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

Every accepted connection gets its own daemon thread. A client that sends
half a request line only blocks its own thread inside a socket read; all
other connections keep going. Connections share nothing except the file
storage, which does no locking (last writer wins).

Within one connection requests are strictly sequential: parse, route,
encode, write, and only then read the next request.

=============================================================================
"""

import logging
import threading
from typing import Optional, Callable

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .handlers import FileStorage, build_router
from .http import HTTPRequest, HTTPResponse, RequestParser, Router, internal_error
from .middleware import MiddlewarePipeline, LoggingMiddleware, CompressionMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    The HTTP server.

    Usage:
        server = HTTPServer(ServerConfig(directory="/tmp/data"))
        server.run()   # blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the HTTP server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()

        self.storage: Optional[FileStorage] = (
            FileStorage(self.config.directory) if self.config.directory else None
        )
        self._router = build_router(self.storage)

        self._middleware = MiddlewarePipeline()
        self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))
        self._compression = CompressionMiddleware()

        # Middleware wrapped around router.handle, built by run() or on first request
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> tuple[str, int]:
        """The bound (host, port); the real port once running."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the listening address cannot be bound.
        """
        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)

        if self.storage is not None:
            logger.info(f"Serving files from {self.storage.root}")
        for line in self._router.describe():
            logger.debug(f"Route: {line}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. Safe from any thread."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("minihttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Give each accepted connection its own thread."""
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        The per-connection request loop (runs in the connection's thread).

        =====================================================================
        CONNECTION LOOP
        =====================================================================

        1. IDLE:     parse the next request; none → close
        2. ROUTING:  middleware + router produce a response
        3. ENCODING: gzip the body if the client accepts it
        4. WRITING:  honor Connection: close, serialize, send
        5. Close if asked to, if the peer is gone or the send failed;
           otherwise back to 1 on the same connection

        =====================================================================
        """
        with conn:  # Context manager ensures connection is closed
            try:
                while conn.is_open:
                    if not self._serve_one(conn):
                        break
            except Exception as e:
                # Never let one bad connection take down the thread silently
                logger.exception(f"[{conn.id}] Connection error: {e}")

    def _serve_one(self, conn: Connection) -> bool:
        """
        Run one request/response exchange.

        Returns:
            True if the connection may carry another request.
        """
        conn.state = ConnectionState.IDLE
        request = self._parser.parse(
            conn.stream,
            conn.address,
            conn.id,
            on_request_line=lambda: setattr(conn, "state", ConnectionState.PARSING),
        )
        if request is None:
            logger.debug(f"[{conn.id}] End of input")
            return False

        conn.state = ConnectionState.ROUTING
        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)
        try:
            response = self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            response = internal_error()

        conn.state = ConnectionState.ENCODING
        response = self._compression.negotiate(request, response)

        keep_open = response.headers.get("Connection") != "close"
        if request.wants_close:
            response.set_header("Connection", "close")
            keep_open = False

        if not conn.send(response.to_bytes()):
            return False

        conn.requests_handled += 1
        return keep_open
