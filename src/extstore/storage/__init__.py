"""External storage backends and facade.

Provides content-addressed storage for large attachments:
- Local filesystem storage (Type: Disk)
- S3-compatible storage (Type: AmazonS3)

Keys are SHA-256 digests of the content, so identical attachments are
stored once. Objects are never updated or deleted.
"""

from extstore.storage.base import StorageBackend, compute_content_key
from extstore.storage.disk import DiskBackend
from extstore.storage.facade import ExternalStorage, StorageState, is_content_key
from extstore.storage.factory import (
    BACKENDS,
    build_external_storage,
    create_backend,
    get_external_storage,
    reset_external_storage,
)
from extstore.storage.s3 import AmazonS3Backend

__all__ = [
    "StorageBackend",
    "DiskBackend",
    "AmazonS3Backend",
    "ExternalStorage",
    "StorageState",
    "BACKENDS",
    "compute_content_key",
    "is_content_key",
    "create_backend",
    "build_external_storage",
    "get_external_storage",
    "reset_external_storage",
]
