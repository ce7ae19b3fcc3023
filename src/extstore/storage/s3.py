"""Amazon S3 storage backend.

Supports:
- AWS S3
- MinIO and other S3-compatible services (via EndpointUrl)

Objects are stored under ``{prefix}{key}`` with the content key as the
object name, so identical attachments share one object.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from extstore.config import ExternalStorageConfig
from extstore.errors import (
    BackendError,
    BackendFetchError,
    BackendInitError,
    BackendStoreError,
)
from extstore.storage.base import StorageBackend

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_text(exc: Exception) -> str:
    """Extract the remote service's own error text from a boto exception."""
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        error = response.get("Error") or {}
        message = error.get("Message") or error.get("Code")
        if message:
            return str(message)
    return str(exc)


def _error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        return str((response.get("Error") or {}).get("Code", ""))
    return ""


class AmazonS3Backend(StorageBackend):
    """S3 storage backend.

    Uses boto3 for synchronous S3 operations. Retries are left to the
    botocore retry configuration.

    Configuration via:
    - Bucket: S3 bucket name (created when absent)
    - AccessKeyId / SecretAccessKey: explicit credentials (required)
    - Region: AWS region (optional)
    - EndpointUrl: For non-AWS S3-compatible services (optional)
    - Prefix: Key prefix for all objects (optional)
    """

    type_name = "AmazonS3"

    def __init__(
        self,
        bucket: str | None,
        access_key_id: str | None,
        secret_access_key: str | None,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        prefix: str = "",
        max_attempts: int = 3,
    ) -> None:
        """Initialize S3 storage.

        Args:
            bucket: S3 bucket name
            access_key_id: AWS access key
            secret_access_key: AWS secret key
            region_name: AWS region
            endpoint_url: Custom endpoint for S3-compatible services
            prefix: Key prefix for all objects
            max_attempts: Transport-level retry attempts
        """
        self.bucket = bucket
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self.prefix = prefix.rstrip("/") + "/" if prefix else ""
        self.max_attempts = max_attempts
        self._client: S3Client | None = None

    @classmethod
    def from_config(cls, config: ExternalStorageConfig) -> AmazonS3Backend:
        return cls(
            bucket=config.bucket,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            prefix=config.prefix,
        )

    @property
    def client(self) -> S3Client:
        if self._client is None:
            raise BackendError("AmazonS3 backend is not initialized", backend=self.type_name)
        return self._client

    def _create_client(self) -> S3Client:
        """Create the boto3 S3 client."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise BackendInitError(
                "Required module boto3 is not installed", backend=self.type_name
            ) from exc

        return boto3.client(
            "s3",
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name=self.region_name,
            endpoint_url=self.endpoint_url,
            config=Config(retries={"max_attempts": self.max_attempts, "mode": "standard"}),
        )

    def init(self) -> AmazonS3Backend:
        """Validate credentials, connect, and ensure the bucket exists."""
        if not self.access_key_id:
            raise BackendInitError("AccessKeyId not provided for AmazonS3", backend=self.type_name)
        if not self.secret_access_key:
            raise BackendInitError(
                "SecretAccessKey not provided for AmazonS3", backend=self.type_name
            )
        if not self.bucket:
            raise BackendInitError("Bucket not provided for AmazonS3", backend=self.type_name)

        client = self._create_client()

        try:
            response = client.list_buckets()
        except Exception as exc:
            raise BackendInitError(
                f"Can't list buckets of AmazonS3: {_error_text(exc)}", backend=self.type_name
            ) from exc

        names = {bucket.get("Name") for bucket in response.get("Buckets", [])}
        if self.bucket not in names:
            params: dict[str, Any] = {"Bucket": self.bucket, "ACL": "private"}
            if self.region_name and self.region_name != "us-east-1":
                params["CreateBucketConfiguration"] = {"LocationConstraint": self.region_name}
            try:
                client.create_bucket(**params)
            except Exception as exc:
                raise BackendInitError(
                    f"Can't create new bucket '{self.bucket}' on AmazonS3: {_error_text(exc)}",
                    backend=self.type_name,
                ) from exc
            logger.info(f"Created bucket {self.bucket} on AmazonS3")

        self._client = client
        return self

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def exists(self, key: str) -> bool:
        """Check if an object exists in S3 (``head_object``)."""
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._object_key(key))
            return True
        except Exception as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                return False
            raise BackendError(
                f"Could not check AmazonS3 for {key}: {_error_text(exc)}",
                backend=self.type_name,
                key=key,
            ) from exc

    def store(self, key: str, content: bytes) -> None:
        """Store an object in S3 unless it already exists."""
        try:
            # No-op if the object exists already
            if self.exists(key):
                return
        except BackendError as exc:
            raise BackendStoreError(
                f"Failed to write to AmazonS3: {exc.message}", backend=self.type_name, key=key
            ) from exc

        try:
            self.client.put_object(Bucket=self.bucket, Key=self._object_key(key), Body=content)
        except Exception as exc:
            raise BackendStoreError(
                f"Failed to write to AmazonS3: {_error_text(exc)}",
                backend=self.type_name,
                key=key,
            ) from exc

        logger.debug(f"Stored {key} in bucket {self.bucket} ({len(content)} bytes)")

    def get(self, key: str) -> bytes:
        """Retrieve object content from S3."""
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._object_key(key))
            return response["Body"].read()
        except BackendError as exc:
            raise BackendFetchError(exc.message, backend=self.type_name, key=key) from exc
        except Exception as exc:
            raise BackendFetchError(
                f"Could not retrieve from AmazonS3: {_error_text(exc)}",
                backend=self.type_name,
                key=key,
            ) from exc

    def describe(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "bucket": self.bucket,
            "prefix": self.prefix,
            "region": self.region_name,
            "endpoint_url": self.endpoint_url,
        }
