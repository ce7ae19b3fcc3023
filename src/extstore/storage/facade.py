"""Storage facade: content addressing in front of one active backend."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any

from extstore.errors import (
    BackendFetchError,
    StorageUnavailableError,
    WriteDisabledError,
)
from extstore.observability.logging import LogContext
from extstore.storage.base import StorageBackend, compute_content_key

logger = logging.getLogger(__name__)

_CONTENT_KEY_RE = re.compile(r"^[0-9a-f]{64}$")


class StorageState(str, Enum):
    """Lifecycle state of the external storage facade."""

    DISABLED = "disabled"  # no configuration supplied
    FAILED = "failed"  # configured, but initialization failed
    ACTIVE = "active"


def is_content_key(value: str) -> bool:
    """Return True if value has the shape of a content key."""
    return bool(_CONTENT_KEY_RE.match(value))


class ExternalStorage:
    """External storage facade.

    Holds the active backend (if any) and computes content keys. Build one
    instance at startup and pass it to every call site that needs storage.
    """

    def __init__(
        self,
        state: StorageState,
        backend: StorageBackend | None = None,
        write: bool = False,
        reason: str | None = None,
    ) -> None:
        if (state is StorageState.ACTIVE) != (backend is not None):
            raise ValueError("An active ExternalStorage requires exactly one backend")
        self.state = state
        self.backend = backend
        self.write = write and backend is not None
        self.reason = reason

    @classmethod
    def disabled(cls) -> ExternalStorage:
        """Storage for deployments without external storage configuration."""
        return cls(StorageState.DISABLED)

    @classmethod
    def failed(cls, reason: str) -> ExternalStorage:
        """Storage whose configured backend could not be initialized."""
        return cls(StorageState.FAILED, reason=reason)

    @classmethod
    def active(cls, backend: StorageBackend, write: bool = True) -> ExternalStorage:
        """Storage serving an initialized backend."""
        return cls(StorageState.ACTIVE, backend=backend, write=write)

    @property
    def is_active(self) -> bool:
        return self.state is StorageState.ACTIVE

    @property
    def backend_name(self) -> str | None:
        return self.backend.type_name if self.backend is not None else None

    @staticmethod
    def content_key(content: bytes) -> str:
        """Compute the content key for raw bytes."""
        return compute_content_key(content)

    def _require_backend(self, key: str | None = None) -> StorageBackend:
        if self.backend is None:
            if self.state is StorageState.FAILED:
                message = f"External storage failed to initialize: {self.reason}"
            else:
                message = "External storage not configured"
            raise StorageUnavailableError(message, key=key)
        return self.backend

    def store(self, content: bytes) -> str:
        """Store content and return its content key.

        Raises:
            StorageUnavailableError: No active backend
            WriteDisabledError: Writes are disabled by configuration
            BackendStoreError: The backend write failed
        """
        key = self.content_key(content)
        backend = self._require_backend(key)
        if not self.write:
            raise WriteDisabledError(
                f"Writes to {backend.type_name} external storage are disabled",
                backend=backend.type_name,
                key=key,
            )

        with LogContext(content_key=key, backend=backend.type_name):
            backend.store(key, content)
            logger.debug(f"Stored {len(content)} bytes externally")
        return key

    def get(self, key: str) -> bytes:
        """Fetch the bytes stored under a content key.

        Raises:
            StorageUnavailableError: No active backend
            BackendFetchError: Missing key, malformed key, or backend failure
        """
        backend = self._require_backend(key)
        if not is_content_key(key):
            raise BackendFetchError(
                f"{key!r} is not a content key", backend=backend.type_name, key=key
            )
        return backend.get(key)

    def describe(self) -> dict[str, Any]:
        """Return non-secret state details for diagnostics."""
        details: dict[str, Any] = {"state": self.state.value, "write": self.write}
        if self.backend is not None:
            details["backend"] = self.backend.describe()
        if self.reason:
            details["reason"] = self.reason
        return details

    def __repr__(self) -> str:
        return f"ExternalStorage(state={self.state.value}, backend={self.backend_name}, write={self.write})"
