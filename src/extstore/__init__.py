"""extstore: external storage for large ticket attachments.

Moves attachment bytes out of the database into a content-addressed
store while the database keeps a small row with the content key.
"""

import importlib.metadata as importlib_metadata

from extstore.decode import with_external_storage
from extstore.errors import (
    BackendError,
    BackendFetchError,
    BackendInitError,
    BackendStoreError,
    ConfigurationError,
    ExternalStorageError,
    StorageUnavailableError,
    WriteDisabledError,
)
from extstore.externalize import (
    ExternalizationResult,
    externalize_attachment,
    externalize_custom_field_value,
)
from extstore.policy import (
    EXTERNALIZE_THRESHOLD,
    attachment_should_externalize,
    custom_field_should_externalize,
)
from extstore.storage import (
    AmazonS3Backend,
    DiskBackend,
    ExternalStorage,
    StorageBackend,
    StorageState,
    build_external_storage,
    get_external_storage,
)


def _detect_version() -> str:
    try:
        return importlib_metadata.version("extstore")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _detect_version()

__all__ = [
    "AmazonS3Backend",
    "BackendError",
    "BackendFetchError",
    "BackendInitError",
    "BackendStoreError",
    "ConfigurationError",
    "DiskBackend",
    "EXTERNALIZE_THRESHOLD",
    "ExternalStorage",
    "ExternalStorageError",
    "ExternalizationResult",
    "StorageBackend",
    "StorageState",
    "StorageUnavailableError",
    "WriteDisabledError",
    "attachment_should_externalize",
    "build_external_storage",
    "custom_field_should_externalize",
    "externalize_attachment",
    "externalize_custom_field_value",
    "get_external_storage",
    "with_external_storage",
]
