"""S3-compatible storage backend implementation.

Implements the StorageBackend protocol for AWS S3, MinIO, and other
S3-compatible services using aiobotocore.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from aiobotocore.session import get_session
from botocore.config import Config
from botocore.exceptions import ClientError

from remote_kv.infra.storage.exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
    map_boto_error,
)

from ..protocol import ObjectMetadata, UploadResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from remote_kv.core.settings.storage import StorageSettings

logger = logging.getLogger(__name__)


class S3Backend:
    """S3-compatible storage backend.

    Example:
        backend = S3Backend(settings)
        await backend.startup()
        await backend.upload_object("a", b"1", content_type="text/plain")
        await backend.shutdown()
    """

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self._session = get_session()
        self._client: Any = None
        self._client_context: Any = None

    @property
    def backend_name(self) -> str:
        """Backend name identifier."""
        return "s3"

    @property
    def bucket(self) -> str:
        return self.settings.bucket

    @property
    def is_ready(self) -> bool:
        """Check if backend is initialized and ready."""
        return self._client is not None

    # ========================================================================
    # Lifecycle Management
    # ========================================================================

    async def startup(self) -> None:
        """Initialize S3 client and connection pool."""
        if self._client is not None:
            logger.debug("S3 backend already initialized")
            return

        logger.info(
            "Initializing S3 backend",
            extra={
                "bucket": self.settings.bucket,
                "endpoint": self.settings.endpoint,
                "region": self.settings.region,
            },
        )

        try:
            boto_config = Config(
                connect_timeout=self.settings.timeout,
                read_timeout=self.settings.timeout,
                max_pool_connections=self.settings.max_pool_connections,
            )
            self._client_context = self._session.create_client(
                "s3",
                **self.settings.get_boto3_config(),
                config=boto_config,
            )
            self._client = await self._client_context.__aenter__()
        except Exception as e:
            self._client_context = None
            logger.exception("Failed to initialize S3 backend", extra={"error": str(e)})
            raise StorageError(
                f"Failed to initialize S3 backend: {e}",
                code="STORAGE_INITIALIZATION_ERROR",
            ) from e

        logger.info("S3 backend initialized successfully")

    async def shutdown(self) -> None:
        """Shutdown S3 client gracefully."""
        if self._client_context is None:
            logger.debug("S3 backend not initialized, nothing to shutdown")
            return

        logger.info("Shutting down S3 backend")
        try:
            await self._client_context.__aexit__(None, None, None)
        except Exception as e:
            logger.warning("Error closing S3 client", extra={"error": str(e)})
        finally:
            self._client = None
            self._client_context = None

        logger.info("S3 backend shutdown complete")

    async def health_check(self) -> bool:
        """Check S3 connectivity and credentials.

        Returns:
            True if healthy, False otherwise
        """
        if self._client is None:
            return False

        try:
            await self._client.head_bucket(Bucket=self.settings.bucket)
            return True
        except Exception as e:
            logger.warning(
                "S3 health check failed",
                extra={"error": str(e), "bucket": self.settings.bucket},
            )
            return False

    def _ensure_client(self) -> Any:
        if self._client is None:
            msg = "S3 backend not initialized. Call startup() first."
            raise StorageNotConfiguredError(msg)
        return self._client

    # ========================================================================
    # Object Operations
    # ========================================================================

    async def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str | None = None,
        cache_control: str | None = None,
    ) -> UploadResult:
        """Upload an object with a single PutObject request."""
        client = self._ensure_client()

        extra_args: dict[str, Any] = {}
        if content_type:
            extra_args["ContentType"] = content_type
        if cache_control:
            extra_args["CacheControl"] = cache_control

        try:
            response = await client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                **extra_args,
            )
        except ClientError as e:
            logger.warning("Failed to upload object to S3", extra={"key": key, "error": str(e)})
            raise map_boto_error(e, operation="upload", key=key) from e

        logger.debug(
            "Object uploaded to S3",
            extra={"key": key, "bucket": self.bucket, "size_bytes": len(data)},
        )
        return UploadResult(
            key=key,
            bucket=self.bucket,
            etag=response.get("ETag", "").strip('"') or None,
            size_bytes=len(data),
            version_id=response.get("VersionId"),
        )

    async def download_object(self, key: str) -> bytes:
        """Download an object from S3."""
        client = self._ensure_client()

        try:
            response = await client.get_object(Bucket=self.bucket, Key=key)
            body = await response["Body"].read()
        except ClientError as e:
            error = map_boto_error(e, operation="download", key=key)
            if not isinstance(error, StorageFileNotFoundError):
                logger.warning(
                    "Failed to download object from S3", extra={"key": key, "error": str(e)}
                )
            raise error from e

        return bytes(body)

    async def delete_object(self, key: str) -> None:
        """Delete an object from S3.

        S3 reports success for missing keys, so this never raises not-found.
        """
        client = self._ensure_client()

        try:
            await client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            logger.warning("Failed to delete object from S3", extra={"key": key, "error": str(e)})
            raise map_boto_error(e, operation="delete", key=key) from e

    async def object_exists(self, key: str) -> bool:
        client = self._ensure_client()

        try:
            await client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            error = map_boto_error(e, operation="exists", key=key)
            if isinstance(error, StorageFileNotFoundError):
                return False
            logger.warning("Failed to check object in S3", extra={"key": key, "error": str(e)})
            raise error from e

    async def list_objects(
        self,
        prefix: str = "",
        max_keys: int = 1000,
        continuation_token: str | None = None,
    ) -> tuple[list[ObjectMetadata], str | None]:
        """List objects with pagination support."""
        client = self._ensure_client()

        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": max_keys,
        }
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        try:
            response = await client.list_objects_v2(**kwargs)
        except ClientError as e:
            logger.warning(
                "Failed to list objects in S3", extra={"prefix": prefix, "error": str(e)}
            )
            raise map_boto_error(e, operation="list", key=prefix) from e

        objects = [
            ObjectMetadata(
                key=item["Key"],
                size_bytes=item.get("Size", 0),
                content_type=None,  # Not returned by list_objects_v2
                last_modified=item.get("LastModified"),
                etag=item.get("ETag", "").strip('"') or None,
            )
            for item in response.get("Contents", [])
        ]
        next_token = response.get("NextContinuationToken") if response.get("IsTruncated") else None
        return objects, next_token

    async def stream_objects(self, prefix: str = "") -> AsyncIterator[ObjectMetadata]:
        """Yield every object matching prefix (automatic pagination)."""
        token: str | None = None
        while True:
            objects, token = await self.list_objects(
                prefix=prefix,
                max_keys=self.settings.list_page_size,
                continuation_token=token,
            )
            for obj in objects:
                yield obj
            if not token:
                break
