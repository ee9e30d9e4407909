"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log line per request on the "minihttp.access" logger:

    text:  127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /echo/abc" 200 3 0.12ms
    json:  {"connection_id": 4, "method": "GET", "path": "/echo/abc", ...}

Configure it like any other logger:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """Structured log entry for a request."""

    connection_id: int
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-style single line."""
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Should be the outermost layer so its timing covers everything inside.

    Args:
        log_format: "text" or "json".
        log_level: Level used for access lines.
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"[{request.connection_id}] Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        if not logger.isEnabledFor(self.log_level):
            return response

        log_entry = RequestLog(
            connection_id=request.connection_id,
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body) if response.body is not None else 0,
            duration_ms=(time.time() - start_time) * 1000,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
