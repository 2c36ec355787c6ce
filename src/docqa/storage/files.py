"""
Local disk file store.

Uploaded bytes are written under one directory with a generated name,
"document-<millis>-<random><ext>", so two uploads with the same original
name never collide. The handle is the file name relative to that
directory; handles that try to escape it are rejected.
"""

import os
import secrets
import time
from pathlib import Path

import structlog

from docqa.base.store import BaseFileStore
from docqa.exceptions import NotFound, StorageUnavailable

logger = structlog.get_logger(__name__)


class LocalFileStore(BaseFileStore):

    def __init__(self, upload_dir: str = "uploads"):
        self.root = Path(upload_dir).resolve()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create upload directory {self.root}: {e}") from e

    def _path(self, handle: str) -> Path:
        path = (self.root / handle).resolve()
        if path.parent != self.root:
            raise NotFound("File", handle)
        return path

    def save(self, filename: str, data: bytes) -> str:
        extension = os.path.splitext(filename)[1].lower()
        handle = f"document-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
        try:
            self._path(handle).write_bytes(data)
        except OSError as e:
            raise StorageUnavailable(f"Could not write {handle}: {e}") from e
        logger.debug("file_saved", handle=handle, size=len(data))
        return handle

    def read_bytes(self, handle: str) -> bytes:
        path = self._path(handle)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise NotFound("File", handle) from None
        except OSError as e:
            raise StorageUnavailable(f"Could not read {handle}: {e}") from e

    def exists(self, handle: str) -> bool:
        try:
            return self._path(handle).is_file()
        except NotFound:
            return False

    def delete(self, handle: str) -> bool:
        try:
            self._path(handle).unlink()
        except (FileNotFoundError, NotFound):
            return False
        except OSError as e:
            raise StorageUnavailable(f"Could not delete {handle}: {e}") from e
        logger.debug("file_deleted", handle=handle)
        return True
