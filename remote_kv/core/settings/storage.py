"""Object storage configuration settings.

Environment variables use STORAGE_ prefix.
Example: STORAGE_BACKEND="s3"
         STORAGE_ENDPOINT="http://localhost:9000"

The bucket name and key prefix are also read from the bare ``BUCKET_NAME``
and ``KEY_PREFIX`` variables.

Supports:
- Google Cloud Storage (default, application default credentials)
- GCS emulators (set endpoint, anonymous credentials are used)
- AWS S3 and S3-compatible services such as MinIO
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_storage_yaml_source


class StorageBackendType(str, Enum):
    """Supported object storage backends."""

    GCS = "gcs"
    S3 = "s3"
    MINIO = "minio"


class StorageSettings(BaseSettings):
    """Object storage settings for the key-value gateway.

    Environment variables use STORAGE_ prefix.
    Example: BUCKET_NAME=my-kv-bucket KEY_PREFIX=kv/
    """

    # ──────────────────────────────────────────────────────────────
    # Backend selection
    # ──────────────────────────────────────────────────────────────

    backend: StorageBackendType = Field(
        default=StorageBackendType.GCS,
        description="Storage backend: gcs, s3 or minio",
    )

    bucket: str = Field(
        min_length=1,
        max_length=222,
        validation_alias=AliasChoices("BUCKET_NAME", "STORAGE_BUCKET", "bucket"),
        description="Bucket holding every key-value object (required)",
    )

    key_prefix: str = Field(
        default="",
        validation_alias=AliasChoices("KEY_PREFIX", "STORAGE_KEY_PREFIX", "key_prefix"),
        description="Prefix prepended to every object name, e.g. 'kv/'",
    )

    # ──────────────────────────────────────────────────────────────
    # Connection configuration
    # ──────────────────────────────────────────────────────────────

    project: str | None = Field(
        default=None,
        description="GCP project ID. None uses the project from application default credentials.",
    )

    endpoint: str | None = Field(
        default=None,
        description="Custom endpoint URL (GCS emulator, MinIO, LocalStack). None for the public service.",
    )

    region: str = Field(
        default="us-east-1",
        description="AWS region (S3 backends only)",
    )

    access_key: SecretStr | None = Field(default=None, description="S3 access key ID")

    secret_key: SecretStr | None = Field(default=None, description="S3 secret access key")

    use_ssl: bool = Field(
        default=True,
        description="Use SSL/TLS for S3 connections (set False for local MinIO without TLS)",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates (set False for self-signed certs in local MinIO)",
    )

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Storage operation timeout in seconds",
    )

    max_pool_connections: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of connections in the S3 connection pool",
    )

    # ──────────────────────────────────────────────────────────────
    # Listing
    # ──────────────────────────────────────────────────────────────

    list_page_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="Objects requested per listing page; all pages are drained",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────

    @model_validator(mode="after")
    def _validate_credential_consistency(self) -> StorageSettings:
        """Validate that both credentials are provided together or neither."""
        has_access_key = self.access_key is not None
        has_secret_key = self.secret_key is not None

        if has_access_key != has_secret_key:
            raise ValueError(
                "Both access_key and secret_key must be provided together when using "
                "static credentials. Provide both or neither (for IAM role authentication)."
            )

        return self

    # ──────────────────────────────────────────────────────────────
    # Computed Properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_emulator(self) -> bool:
        """Check if a custom endpoint is configured."""
        return self.endpoint is not None

    # ──────────────────────────────────────────────────────────────
    # Helper Methods
    # ──────────────────────────────────────────────────────────────

    def get_boto3_config(self) -> dict[str, Any]:
        """Get configuration dict for an aiobotocore S3 client.

        Returns:
            Dictionary with credentials (if provided), endpoint, SSL settings and region.
        """
        config: dict[str, Any] = {
            "region_name": self.region,
            "use_ssl": self.use_ssl,
            "verify": self.verify_ssl,
        }

        # Without static credentials botocore falls back to its default chain
        if self.access_key is not None and self.secret_key is not None:
            config["aws_access_key_id"] = self.access_key.get_secret_value()
            config["aws_secret_access_key"] = self.secret_key.get_secret_value()

        if self.endpoint:
            config["endpoint_url"] = self.endpoint

        return config

    def describe(self) -> dict[str, Any]:
        """Return the effective configuration without secrets."""
        return {
            "backend": self.backend.value,
            "bucket": self.bucket,
            "key_prefix": self.key_prefix,
            "project": self.project,
            "endpoint": self.endpoint,
            "region": self.region if self.backend is not StorageBackendType.GCS else None,
            "static_credentials": self.access_key is not None,
            "list_page_size": self.list_page_size,
        }

    # ──────────────────────────────────────────────────────────────
    # Model Configuration
    # ──────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_storage_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
