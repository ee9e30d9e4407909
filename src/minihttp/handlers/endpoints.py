"""
=============================================================================
ENDPOINTS
=============================================================================

The fixed endpoint table, in match order:

    ┌──────────┬──────────────────┬─────────────────────────────────────────┐
    │ Method   │ Path             │ Response                                │
    ├──────────┼──────────────────┼─────────────────────────────────────────┤
    │ any      │ /                │ 200, no body                            │
    │ any      │ /echo/<text>     │ 200 text/plain, body = <text>           │
    │ any      │ /user-agent      │ 200 text/plain, body = User-Agent       │
    │ GET      │ /files/<name>    │ 200 octet-stream, or 404 if missing     │
    │ POST     │ /files/<name>    │ 201, request body stored under <name>   │
    │ anything else               │ 404, no body                            │
    └─────────────────────────────┴─────────────────────────────────────────┘

Handlers are pure functions of the request (plus the storage for /files/).
They never look at the connection and never set Content-Length.

=============================================================================
"""

import logging
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, ok, created, not_found
from ..http.router import Router
from .storage import FileStorage, StorageError


logger = logging.getLogger(__name__)


def root(request: HTTPRequest) -> HTTPResponse:
    """GET / → 200 with no body."""
    return ok()


def echo(request: HTTPRequest) -> HTTPResponse:
    """Echo the rest of the path back, byte for byte (no URL decoding)."""
    return ok(request.path_params.get("text", ""))


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """
    Echo the User-Agent header.

    A request without User-Agent gets an empty text body.
    """
    return ok(request.user_agent)


class FilesHandler:
    """
    /files/<name> backed by a FileStorage.

    With no storage configured every /files/ request is a 404.
    """

    def __init__(self, storage: Optional[FileStorage] = None):
        self.storage = storage

    def read(self, request: HTTPRequest) -> HTTPResponse:
        """GET /files/<name>: stored bytes, or 404."""
        name = request.path_params.get("filename", "")
        if self.storage is None:
            return not_found()

        try:
            if not self.storage.exists(name):
                return not_found()
            content = self.storage.read(name)
        except StorageError as e:
            logger.debug(f"[{request.connection_id}] {e}")
            return not_found()

        return ResponseBuilder().binary(content).build()

    def write(self, request: HTTPRequest) -> HTTPResponse:
        """POST /files/<name>: store the request body, 201."""
        name = request.path_params.get("filename", "")
        if self.storage is None:
            return not_found()

        try:
            self.storage.write(name, request.body)
        except StorageError as e:
            logger.debug(f"[{request.connection_id}] {e}")
            return not_found()

        return created()


def build_router(storage: Optional[FileStorage] = None) -> Router:
    """
    Build the router holding the endpoint table above.

    Args:
        storage: Backing store for /files/, or None to disable it.
    """
    router = Router()
    files = FilesHandler(storage)

    router.add_route("/", root, name="root")
    router.add_route("/echo/*text", echo, name="echo")
    router.add_route("/user-agent", user_agent, name="user_agent")
    router.add_route("/files/*filename", files.read, method="GET", name="read_file")
    router.add_route("/files/*filename", files.write, method="POST", name="write_file")

    return router
