"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass. Defaults give the stock setup: listen on
localhost:4221, no storage directory, no read timeout.

    # In code
    config = ServerConfig(directory="/tmp/data")

    # From the environment
    MINIHTTP_PORT=8080 MINIHTTP_LOG_LEVEL=DEBUG minihttp --directory /tmp/data

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK     host, port, backlog, buffer_size, timeout
    STORAGE     directory
    LOGGING     log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "localhost"
    """The address to bind to."""

    port: int = 4221
    """
    The port number to listen on.
    0 lets the OS pick a free port (tests use this).
    """

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 4096
    """Maximum bytes requested per recv() call."""

    timeout: Optional[float] = None
    """
    Socket read timeout in seconds.
    None = wait forever for the next bytes; a silent client keeps its
    connection until it hangs up. Set a value to reap idle connections.
    """

    # ─────────────────────────────────────────────────────────────────────
    # STORAGE
    # ─────────────────────────────────────────────────────────────────────

    directory: Optional[str] = None
    """
    Root directory for /files/. None disables the endpoint (404).
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MINIHTTP_HOST        Server host (default: localhost)
        MINIHTTP_PORT        Server port (default: 4221)
        MINIHTTP_DIRECTORY   Storage root for /files/ (default: unset)
        MINIHTTP_TIMEOUT     Read timeout in seconds (default: unset)
        MINIHTTP_LOG_LEVEL   Logging level (default: INFO)
        MINIHTTP_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        timeout = os.getenv("MINIHTTP_TIMEOUT")
        return cls(
            host=os.getenv("MINIHTTP_HOST", "localhost"),
            port=int(os.getenv("MINIHTTP_PORT", "4221")),
            directory=os.getenv("MINIHTTP_DIRECTORY") or None,
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("MINIHTTP_LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so bad settings fail at startup,
        not on the first request.

        Raises:
            ValueError: On the first invalid setting found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}")

        if self.directory and os.path.exists(self.directory) and not os.path.isdir(self.directory):
            raise ValueError(f"Not a directory: {self.directory}")
