"""External storage factory for extstore."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from extstore.config import ExternalStorageConfig, Settings, settings
from extstore.errors import BackendInitError, ConfigurationError
from extstore.storage.base import StorageBackend
from extstore.storage.disk import DiskBackend
from extstore.storage.facade import ExternalStorage
from extstore.storage.s3 import AmazonS3Backend

logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[StorageBackend]] = {
    DiskBackend.type_name: DiskBackend,
    AmazonS3Backend.type_name: AmazonS3Backend,
}

_storage: ExternalStorage | None = None
_storage_lock = threading.Lock()


def create_backend(config: ExternalStorageConfig) -> StorageBackend:
    """Look up the configured ``Type`` and build an uninitialized backend."""
    backend_cls = BACKENDS.get(config.type)
    if backend_cls is None:
        supported = ", ".join(sorted(BACKENDS))
        raise ConfigurationError(
            f"Unsupported external storage Type '{config.type}'. Supported values: {supported}.",
            backend=config.type,
        )
    return backend_cls.from_config(config)


def build_external_storage(
    options: Mapping[str, Any] | ExternalStorageConfig | None,
) -> ExternalStorage:
    """Build external storage from configuration.

    Never raises for configuration or initialization problems: those are
    logged and produce a FAILED storage that refuses every operation.

    Args:
        options: Operator option mapping, validated config, or None

    Returns:
        DISABLED storage when options is empty, otherwise ACTIVE or FAILED
    """
    if not options:
        return ExternalStorage.disabled()

    try:
        if isinstance(options, ExternalStorageConfig):
            config = options
        else:
            config = ExternalStorageConfig.from_mapping(options)
        backend = create_backend(config).init()
    except (ConfigurationError, BackendInitError) as exc:
        logger.error(f"External storage disabled: {exc.message}")
        return ExternalStorage.failed(exc.message)

    if not config.write:
        logger.info(f"External storage {config.type} is read-only; new writes are disabled")
    return ExternalStorage.active(backend, write=config.write)


def get_external_storage(app_settings: Settings | None = None) -> ExternalStorage:
    """Return the process-wide ExternalStorage, building it exactly once."""
    global _storage
    if _storage is not None:
        return _storage

    with _storage_lock:
        if _storage is None:
            source = app_settings or settings
            _storage = build_external_storage(source.external_storage_options())
        return _storage


def reset_external_storage() -> None:
    """Forget the process-wide ExternalStorage (tests, configuration reload)."""
    global _storage
    with _storage_lock:
        _storage = None
