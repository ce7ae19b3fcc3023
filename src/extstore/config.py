from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extstore.errors import ConfigurationError


class ExternalStorageConfig(BaseModel):
    """Validated external storage options.

    Accepts the operator-facing mapping keys (``Type``, ``Path``, ``Bucket``,
    ``AccessKeyId``, ``SecretAccessKey``, ``Write``) as well as the snake_case
    field names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    type: str = Field(validation_alias="Type")
    path: str | None = Field(default=None, validation_alias="Path")
    bucket: str | None = Field(default=None, validation_alias="Bucket")
    access_key_id: str | None = Field(default=None, validation_alias="AccessKeyId")
    secret_access_key: str | None = Field(default=None, validation_alias="SecretAccessKey")
    region: str | None = Field(default=None, validation_alias="Region")
    endpoint_url: str | None = Field(default=None, validation_alias="EndpointUrl")
    prefix: str = Field(default="", validation_alias="Prefix")
    write: bool = Field(default=True, validation_alias="Write")

    @field_validator("type")
    @classmethod
    def _type_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Type must not be empty")
        return value

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ExternalStorageConfig:
        """Validate a raw option mapping.

        Raises:
            ConfigurationError: If the mapping is missing ``Type`` or has
                values of the wrong shape.
        """
        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid external storage configuration: {exc}") from exc


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EXTSTORE_", env_file=".env", extra="ignore")

    # Backend selection; unset disables external storage
    storage_type: str | None = Field(default=None, validation_alias="EXTSTORE_TYPE")
    storage_write: bool = Field(default=True, validation_alias="EXTSTORE_WRITE")

    # Disk backend
    storage_path: str | None = Field(default=None, validation_alias="EXTSTORE_PATH")

    # AmazonS3 backend
    s3_bucket: str | None = Field(default=None, validation_alias="EXTSTORE_BUCKET")
    s3_prefix: str = Field(default="", validation_alias="EXTSTORE_PREFIX")
    s3_region: str | None = Field(default=None, validation_alias="EXTSTORE_REGION")
    s3_endpoint_url: str | None = Field(default=None, validation_alias="EXTSTORE_ENDPOINT_URL")
    s3_access_key_id: str | None = Field(default=None, validation_alias="AWS_ACCESS_KEY_ID")
    s3_secret_access_key: str | None = Field(default=None, validation_alias="AWS_SECRET_ACCESS_KEY")

    # Observability
    log_level: str = Field(default="INFO", validation_alias="EXTSTORE_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="EXTSTORE_LOG_JSON")

    def external_storage_options(self) -> dict[str, Any] | None:
        """Return the operator-style option mapping, or None when disabled."""
        if not self.storage_type:
            return None
        return {
            "Type": self.storage_type,
            "Path": self.storage_path,
            "Bucket": self.s3_bucket,
            "AccessKeyId": self.s3_access_key_id,
            "SecretAccessKey": self.s3_secret_access_key,
            "Region": self.s3_region,
            "EndpointUrl": self.s3_endpoint_url,
            "Prefix": self.s3_prefix,
            "Write": self.storage_write,
        }


settings = Settings()
