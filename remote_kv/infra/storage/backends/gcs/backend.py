"""Google Cloud Storage backend implementation.

Implements the StorageBackend protocol with google-cloud-storage. The SDK is
synchronous, so every call runs in a worker thread via ``asyncio.to_thread``;
``storage.Client`` is safe to share between threads.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import GoogleAPICallError
from google.auth.credentials import AnonymousCredentials
from google.cloud import storage

from remote_kv.infra.storage.exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
    map_gcs_error,
)

from ..protocol import ObjectMetadata, UploadResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from remote_kv.core.settings.storage import StorageSettings

logger = logging.getLogger(__name__)


class GCSBackend:
    """Google Cloud Storage backend.

    Uses application default credentials, or anonymous credentials when an
    emulator endpoint is configured.

    Example:
        backend = GCSBackend(settings)
        await backend.startup()
        await backend.upload_object("users/alice/a", b"1", content_type="text/plain")
        await backend.shutdown()
    """

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self._client: storage.Client | None = None
        self._bucket: storage.Bucket | None = None

    @property
    def backend_name(self) -> str:
        """Backend name identifier."""
        return "gcs"

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
        """Create the storage client and bucket handle."""
        if self._client is not None:
            logger.debug("GCS backend already initialized")
            return

        logger.info(
            "Initializing GCS backend",
            extra={
                "bucket": self.settings.bucket,
                "endpoint": self.settings.endpoint,
                "project": self.settings.project,
            },
        )

        try:
            # Credential discovery may touch the metadata server
            self._client = await asyncio.to_thread(self._create_client)
        except Exception as e:
            logger.exception("Failed to initialize GCS backend", extra={"error": str(e)})
            raise StorageError(
                f"Failed to initialize GCS backend: {e}",
                code="STORAGE_INITIALIZATION_ERROR",
            ) from e

        self._bucket = self._client.bucket(self.settings.bucket)
        logger.info("GCS backend initialized successfully")

    def _create_client(self) -> storage.Client:
        if self.settings.is_emulator:
            return storage.Client(
                project=self.settings.project or "local",
                credentials=AnonymousCredentials(),
                client_options={"api_endpoint": self.settings.endpoint},
            )
        return storage.Client(project=self.settings.project)

    async def shutdown(self) -> None:
        """Close the client's HTTP session."""
        if self._client is None:
            logger.debug("GCS backend not initialized, nothing to shutdown")
            return

        logger.info("Shutting down GCS backend")
        try:
            await asyncio.to_thread(self._client.close)
        except Exception as e:
            logger.warning("Error closing GCS client", extra={"error": str(e)})
        finally:
            self._client = None
            self._bucket = None

        logger.info("GCS backend shutdown complete")

    async def health_check(self) -> bool:
        """Check that the configured bucket is reachable.

        Returns:
            True if healthy, False otherwise
        """
        if self._bucket is None:
            return False

        try:
            return await asyncio.to_thread(self._bucket.exists, timeout=self.settings.timeout)
        except Exception as e:
            logger.warning(
                "GCS health check failed",
                extra={"error": str(e), "bucket": self.settings.bucket},
            )
            return False

    def _ensure_bucket(self) -> storage.Bucket:
        if self._bucket is None:
            msg = "GCS backend not initialized. Call startup() first."
            raise StorageNotConfiguredError(msg)
        return self._bucket

    def _ensure_client(self) -> storage.Client:
        if self._client is None:
            msg = "GCS backend not initialized. Call startup() first."
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
        """Upload an object with a single multipart request.

        ``upload_from_string`` only switches to a resumable session for
        payloads above the blob chunk size, which is left unset here.
        """
        blob = self._ensure_bucket().blob(key)
        if cache_control:
            blob.cache_control = cache_control

        try:
            await asyncio.to_thread(
                blob.upload_from_string,
                data,
                content_type=content_type,
                timeout=self.settings.timeout,
            )
        except GoogleAPICallError as e:
            logger.warning("Failed to upload object to GCS", extra={"key": key, "error": str(e)})
            raise map_gcs_error(e, operation="upload", key=key) from e
        except Exception as e:
            logger.exception("Unexpected error during GCS upload", extra={"key": key})
            raise StorageError(
                f"Failed to upload {key}: {e}",
                code="STORAGE_UPLOAD_ERROR",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

        logger.debug(
            "Object uploaded to GCS",
            extra={"key": key, "bucket": self.bucket, "size_bytes": len(data)},
        )
        return UploadResult(
            key=key,
            bucket=self.bucket,
            etag=blob.etag,
            size_bytes=len(data),
            version_id=str(blob.generation) if blob.generation is not None else None,
        )

    async def download_object(self, key: str) -> bytes:
        """Download an object's content as bytes."""
        blob = self._ensure_bucket().blob(key)
        try:
            return await asyncio.to_thread(blob.download_as_bytes, timeout=self.settings.timeout)
        except GoogleAPICallError as e:
            error = map_gcs_error(e, operation="download", key=key)
            if not isinstance(error, StorageFileNotFoundError):
                logger.warning(
                    "Failed to download object from GCS", extra={"key": key, "error": str(e)}
                )
            raise error from e
        except Exception as e:
            logger.exception("Unexpected error during GCS download", extra={"key": key})
            raise StorageError(
                f"Failed to download {key}: {e}",
                code="STORAGE_DOWNLOAD_ERROR",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

    async def delete_object(self, key: str) -> None:
        """Delete an object; a missing object raises StorageFileNotFoundError."""
        blob = self._ensure_bucket().blob(key)
        try:
            await asyncio.to_thread(blob.delete, timeout=self.settings.timeout)
        except GoogleAPICallError as e:
            error = map_gcs_error(e, operation="delete", key=key)
            if not isinstance(error, StorageFileNotFoundError):
                logger.warning(
                    "Failed to delete object from GCS", extra={"key": key, "error": str(e)}
                )
            raise error from e
        except Exception as e:
            logger.exception("Unexpected error during GCS deletion", extra={"key": key})
            raise StorageError(
                f"Failed to delete {key}: {e}",
                code="STORAGE_DELETE_ERROR",
                metadata={"key": key, "bucket": self.bucket},
            ) from e

    async def object_exists(self, key: str) -> bool:
        blob = self._ensure_bucket().blob(key)
        try:
            return await asyncio.to_thread(blob.exists, timeout=self.settings.timeout)
        except GoogleAPICallError as e:
            logger.warning("Failed to check object in GCS", extra={"key": key, "error": str(e)})
            raise map_gcs_error(e, operation="exists", key=key) from e

    async def list_objects(
        self,
        prefix: str = "",
        max_keys: int = 1000,
        continuation_token: str | None = None,
    ) -> tuple[list[ObjectMetadata], str | None]:
        """List one page of objects with the given name prefix."""
        client = self._ensure_client()
        try:
            return await asyncio.to_thread(
                self._list_page, client, prefix, max_keys, continuation_token
            )
        except GoogleAPICallError as e:
            logger.warning(
                "Failed to list objects in GCS", extra={"prefix": prefix, "error": str(e)}
            )
            raise map_gcs_error(e, operation="list", key=prefix) from e

    def _list_page(
        self,
        client: storage.Client,
        prefix: str,
        max_keys: int,
        continuation_token: str | None,
    ) -> tuple[list[ObjectMetadata], str | None]:
        iterator: Any = client.list_blobs(
            self.bucket,
            prefix=prefix or None,
            page_size=max_keys,
            page_token=continuation_token,
            timeout=self.settings.timeout,
        )
        page = next(iterator.pages, None)
        blobs = list(page) if page is not None else []

        objects = [
            ObjectMetadata(
                key=blob.name,
                size_bytes=blob.size or 0,
                content_type=blob.content_type,
                last_modified=blob.updated,
                etag=blob.etag,
            )
            for blob in blobs
        ]
        return objects, iterator.next_page_token

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
