"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket: create, bind, listen, accept. Every accepted
client socket is wrapped in a Connection and handed to a callback; what
happens next (threads, HTTP) is the caller's business.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(callback)                                                   │
    │        ├──► _create_socket()   SO_REUSEADDR, TCP_NODELAY, 1s timeout │
    │        ├──► bind() + listen()                                        │
    │        ├──► _setup_signals()   SIGTERM/SIGINT (main thread only)     │
    │        └──► _accept_loop()     blocks until shutdown()               │
    │                                                                      │
    │    shutdown()                  any thread; loop exits within ~1s     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    # How often the accept loop wakes up to check for shutdown
    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        self.config = config

        # Created lazily in start()
        self._socket: Optional[socket.socket] = None

        self._running = False
        self._ready_event = threading.Event()

        # Original signal handlers, restored on cleanup
        self._original_handlers: dict = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port).

        After start() this reports the real port, which matters when the
        config asked for port 0.
        """
        if self._socket is not None:
            try:
                host, port = self._socket.getsockname()[:2]
                return (host, port)
            except OSError:
                pass
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Restarting right after a stop must not fail with "Address already in use"
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Responses are small; send them now rather than waiting to coalesce
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up periodically so shutdown() is noticed
        sock.settimeout(self.ACCEPT_POLL_INTERVAL)

        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers for graceful shutdown.

        Python only allows this from the main thread. A server started
        from a background thread (tests, embedding) is stopped with
        shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept connections. BLOCKS until shutdown().

        Args:
            connection_handler: Called once per accepted Connection, on the
                                accept thread. It must not block.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """Accept connections until shutdown."""
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Periodic wake-up to re-check self._running
                continue
            except OSError as e:
                # Socket error - usually means we're shutting down
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )
            logger.debug(f"[{conn.id}] Accepted connection from {client_address[0]}:{client_address[1]}")

            connection_handler(conn)

    def shutdown(self):
        """
        Initiate graceful shutdown.

        Safe to call from any thread, and more than once.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the listening socket is bound.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)

