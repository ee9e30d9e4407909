"""
Request handlers: the endpoint table and the file storage behind /files/.
"""

from .storage import FileStorage, StorageError
from .endpoints import FilesHandler, build_router, echo, root, user_agent

__all__ = [
    "FileStorage",
    "StorageError",
    "FilesHandler",
    "build_router",
    "root",
    "echo",
    "user_agent",
]
