"""
=============================================================================
FILE STORAGE
=============================================================================

The blob store behind /files/. Keys are filenames, values are raw bytes,
and the backing store is a single directory on disk:

    storage = FileStorage("/tmp/data")
    storage.write("notes.txt", b"hello")
    storage.exists("notes.txt")   # True
    storage.read("notes.txt")     # b"hello"

=============================================================================
SECURITY
=============================================================================

Every name is resolved against the root and the result must still be
inside the root. "../../etc/passwd", "/etc/passwd" and "" all raise
StorageError instead of touching the filesystem.

There is no locking. Two connections writing the same name race and the
last writer wins.

=============================================================================
"""

import errno
import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised for names that don't map to a file inside the storage root."""


class FileStorage:
    """
    Filename-addressed blob store rooted at a directory.

    Args:
        root: Directory holding the blobs. Created if missing.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, name: str) -> Path:
        """
        Map a filename to a path inside the root.

        Raises:
            StorageError: If the name is empty, unusable as a path, or
                          escapes the root.
        """
        if not name:
            raise StorageError("Empty filename")
        if "\x00" in name:
            raise StorageError(f"NUL byte in filename: {name!r}")

        try:
            full_path = (self.root / name).resolve()
        except (OSError, ValueError) as e:
            raise StorageError(f"Unusable filename {name!r}: {e}") from None

        try:
            full_path.relative_to(self.root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {name!r}")
            raise StorageError(f"Filename escapes storage root: {name!r}") from None

        if full_path == self.root:
            raise StorageError(f"Filename names the storage root: {name!r}")

        return full_path

    def exists(self, name: str) -> bool:
        """True if `name` is a regular file in the store."""
        path = self._resolve(name)
        try:
            return path.is_file()
        except OSError:
            # ENAMETOOLONG and friends: nothing by that name can be stored
            return False

    def read(self, name: str) -> bytes:
        """Return the stored bytes for `name`."""
        return self._resolve(name).read_bytes()

    def write(self, name: str, data: bytes) -> None:
        """Store `data` under `name`, replacing any previous content."""
        path = self._resolve(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            if e.errno != errno.ENAMETOOLONG:
                raise
            raise StorageError(f"Filename too long: {name!r}") from None
        logger.debug(f"Stored {len(data)} bytes as {name!r}")
