"""Local filesystem storage backend.

Stores objects in a sharded directory structure:
    {path}/{key[0:3]}/{key[3:6]}/{key[6:]}

This provides:
- Simple deployment (no external services)
- Bounded directory sizes for large attachment counts
- Easy backup and inspection
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from extstore.config import ExternalStorageConfig
from extstore.errors import BackendFetchError, BackendInitError, BackendStoreError
from extstore.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class DiskBackend(StorageBackend):
    """Local filesystem storage backend."""

    type_name = "Disk"

    def __init__(self, path: str | Path | None) -> None:
        """Initialize disk storage.

        Args:
            path: Base directory for stored objects
        """
        self.path = Path(path) if path else None
        self.file_mode = 0o644

    @classmethod
    def from_config(cls, config: ExternalStorageConfig) -> DiskBackend:
        return cls(path=config.path)

    @property
    def base_path(self) -> Path:
        if self.path is None:
            raise BackendInitError("Path not provided for Disk", backend=self.type_name)
        return self.path

    def init(self) -> DiskBackend:
        """Create the base directory and verify it is writable."""
        base_path = self.base_path

        try:
            base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackendInitError(
                f"Failed to create directory {base_path} for Disk: {exc}",
                backend=self.type_name,
            ) from exc

        if not base_path.is_dir():
            raise BackendInitError(
                f"Path {base_path} for Disk is not a directory", backend=self.type_name
            )
        if not os.access(base_path, os.W_OK):
            raise BackendInitError(
                f"Path {base_path} for Disk is not writable", backend=self.type_name
            )

        # Objects follow the process umask, as a plain open() would
        umask = os.umask(0)
        os.umask(umask)
        self.file_mode = 0o666 & ~umask

        logger.info(f"Disk storage ready at {base_path}")
        return self

    def _object_path(self, key: str) -> Path:
        """Get the full path for a content key."""
        return self.base_path / key[:3] / key[3:6] / key[6:]

    def exists(self, key: str) -> bool:
        return self._object_path(key).is_file()

    def store(self, key: str, content: bytes) -> None:
        """Store an object, writing through a temporary file."""
        object_path = self._object_path(key)

        # No-op if the object exists already
        if self.exists(key):
            return

        try:
            object_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=object_path.parent, prefix=".tmp-")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.chmod(tmp_name, self.file_mode)
                os.replace(tmp_name, object_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise BackendStoreError(
                f"Failed to write {object_path} for Disk: {exc}",
                backend=self.type_name,
                key=key,
            ) from exc

        logger.debug(f"Stored {key} at {object_path} ({len(content)} bytes)")

    def get(self, key: str) -> bytes:
        object_path = self._object_path(key)
        try:
            return object_path.read_bytes()
        except OSError as exc:
            raise BackendFetchError(
                f"Failed to read {object_path} for Disk: {exc}",
                backend=self.type_name,
                key=key,
            ) from exc

    def describe(self) -> dict[str, Any]:
        return {"type": self.type_name, "path": str(self.path) if self.path else None}
