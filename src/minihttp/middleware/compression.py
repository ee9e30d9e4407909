"""
=============================================================================
CONTENT ENCODING NEGOTIATION
=============================================================================

Clients list the encodings they can decode in Accept-Encoding:

    Accept-Encoding: deflate, gzip , br

We only speak gzip. If "gzip" is one of the comma-separated tokens (exact,
case-sensitive, surrounding whitespace ignored) and the response has a
non-empty body, the body is replaced by its gzip form and the response
gets Content-Encoding: gzip. Everything else passes through untouched.

=============================================================================
ORDERING
=============================================================================

    router ──► negotiate() ──► Connection header ──► to_bytes()
                   │                                     │
                   └── rewrites the body                 └── Content-Length
                                                             computed HERE

Negotiation has to run before serialization, otherwise Content-Length
would describe the uncompressed body.

=============================================================================
"""

import gzip
import logging
from typing import FrozenSet, Iterable, Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


class CompressionMiddleware(Middleware):
    """
    gzip response compression driven by Accept-Encoding.

    Usable as a pipeline layer, or directly through negotiate() by code
    that owns the response (the connection loop does this).

    Args:
        level: gzip compression level (1 fastest ... 9 smallest).
        encodings: Encodings we can produce. Only "gzip" is implemented.
    """

    SUPPORTED_ENCODINGS: FrozenSet[str] = frozenset({"gzip"})

    def __init__(self, level: int = 9, encodings: Optional[Iterable[str]] = None):
        self.level = level
        self.encodings = frozenset(encodings) if encodings else self.SUPPORTED_ENCODINGS

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self.negotiate(request, next(request))

    def select_encoding(self, request: HTTPRequest) -> Optional[str]:
        """
        Pick the first Accept-Encoding token we support.

        Returns:
            The encoding name, or None for identity.
        """
        for token in request.accepted_encodings:
            if token in self.encodings:
                return token
        return None

    def negotiate(self, request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
        """
        Encode the response body if the client accepts an encoding we have.

        Args:
            request: The request whose Accept-Encoding we honor.
            response: The response to (maybe) rewrite in place.

        Returns:
            The same response object.
        """
        encoding = self.select_encoding(request)
        if encoding is None:
            return response

        # Nothing to compress
        if not response.body:
            return response

        original_size = len(response.body)
        response.body = gzip.compress(response.body, compresslevel=self.level, mtime=0)
        response.headers["Content-Encoding"] = encoding

        logger.debug(
            f"[{request.connection_id}] {encoding}: {original_size} -> {len(response.body)} bytes"
        )
        return response
