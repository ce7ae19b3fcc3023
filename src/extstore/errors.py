"""Exception hierarchy for external attachment storage."""

from __future__ import annotations


class ExternalStorageError(Exception):
    """Base exception for external storage errors."""

    def __init__(
        self,
        message: str,
        backend: str | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.backend = backend
        self.key = key


class ConfigurationError(ExternalStorageError):
    """External storage configuration is invalid or incomplete."""

    pass


class BackendInitError(ExternalStorageError):
    """A configured backend failed to initialize."""

    pass


class StorageUnavailableError(ExternalStorageError):
    """No active backend is available."""

    pass


class WriteDisabledError(ExternalStorageError):
    """New writes are disabled for this deployment."""

    pass


class BackendError(ExternalStorageError):
    """A backend call failed."""

    pass


class BackendStoreError(BackendError):
    """Writing an object to a backend failed."""

    pass


class BackendFetchError(BackendError):
    """Reading an object from a backend failed (including missing keys)."""

    pass
