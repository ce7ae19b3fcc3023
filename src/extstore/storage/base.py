"""Base storage backend interface.

Defines the abstract interface for external storage backends. Objects are
addressed by content key and are immutable once written.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from extstore.config import ExternalStorageConfig


def compute_content_key(content: bytes) -> str:
    """Compute the content key (lowercase hex SHA-256) of raw bytes."""
    return hashlib.sha256(content).hexdigest()


class StorageBackend(ABC):
    """Abstract base class for external storage backends."""

    # Configuration ``Type`` value selecting this backend
    type_name: ClassVar[str] = ""

    @classmethod
    @abstractmethod
    def from_config(cls, config: ExternalStorageConfig) -> StorageBackend:
        """Build an uninitialized backend from validated configuration."""
        ...

    @abstractmethod
    def init(self) -> StorageBackend:
        """Validate options and establish session state.

        Returns:
            The backend itself, ready for use

        Raises:
            BackendInitError: Naming the missing option or the failed call
        """
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if an object is stored under key.

        Raises:
            BackendError: If the existence check itself failed
        """
        ...

    @abstractmethod
    def store(self, key: str, content: bytes) -> None:
        """Store content under key.

        A no-op when an object already exists under key.

        Raises:
            BackendStoreError: If the write failed
        """
        ...

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Retrieve the exact bytes stored under key.

        Raises:
            BackendFetchError: If the key is absent or the read failed
        """
        ...

    def describe(self) -> dict[str, Any]:
        """Return non-secret details for diagnostics."""
        return {"type": self.type_name}
