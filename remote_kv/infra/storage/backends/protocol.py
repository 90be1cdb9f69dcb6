"""Storage backend protocol and normalized data structures.

This module defines:
- Protocol interface that all storage backends must implement
- Normalized data structures for cross-backend compatibility
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from datetime import datetime


# ============================================================================
# Normalized Data Structures
# ============================================================================


@dataclass(frozen=True)
class ObjectMetadata:
    """Normalized object metadata across all storage backends.

    Attributes:
        key: Full object name inside the bucket
        size_bytes: Object size in bytes
        content_type: MIME type, when the listing call returns it
        last_modified: Last modification timestamp
        etag: Entity tag for version identification
    """

    key: str
    size_bytes: int
    content_type: str | None = None
    last_modified: datetime | None = None
    etag: str | None = None


@dataclass(frozen=True)
class UploadResult:
    """Result of an upload operation.

    Attributes:
        key: Object name where the value was written
        bucket: Bucket name
        etag: Entity tag of the uploaded object
        size_bytes: Size of the uploaded object in bytes
        version_id: Generation (GCS) or version ID (S3), when the backend reports one
    """

    key: str
    bucket: str
    etag: str | None
    size_bytes: int
    version_id: str | None = None


# ============================================================================
# Storage Backend Protocol
# ============================================================================


class StorageBackend(Protocol):
    """Protocol interface for storage backends.

    All backends (GCS, S3, the in-memory test double) implement this protocol
    structurally. Every operation targets the single configured bucket.

    Errors are reported as ``StorageError`` subclasses; a missing object is
    always ``StorageFileNotFoundError`` so callers can decide what absence
    means for them.
    """

    @property
    def backend_name(self) -> str:
        """Name of the backend (e.g., 'gcs', 's3')."""
        ...

    @property
    def bucket(self) -> str:
        """Bucket every operation targets."""
        ...

    @property
    def is_ready(self) -> bool:
        """Check if backend is initialized and ready for operations."""
        ...

    # ========================================================================
    # Lifecycle Management
    # ========================================================================

    async def startup(self) -> None:
        """Initialize backend (create clients, connection pools, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Gracefully shutdown backend (close connections, cleanup resources)."""
        ...

    async def health_check(self) -> bool:
        """Check backend health and bucket reachability.

        Returns:
            True if healthy, False otherwise
        """
        ...

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
        """Upload an object in a single request, replacing any existing one.

        Raises:
            StorageError: If upload fails
        """
        ...

    async def download_object(self, key: str) -> bytes:
        """Download an object's full content.

        Raises:
            StorageFileNotFoundError: If object doesn't exist
            StorageError: If download fails
        """
        ...

    async def delete_object(self, key: str) -> None:
        """Delete an object.

        Raises:
            StorageFileNotFoundError: If the backend reports the object missing
            StorageError: If deletion fails
        """
        ...

    async def object_exists(self, key: str) -> bool:
        """Check if an object exists."""
        ...

    async def list_objects(
        self,
        prefix: str = "",
        max_keys: int = 1000,
        continuation_token: str | None = None,
    ) -> tuple[list[ObjectMetadata], str | None]:
        """List one page of objects whose names start with ``prefix``.

        Returns:
            Tuple of (object list, next continuation token or None)
        """
        ...

    def stream_objects(self, prefix: str = "") -> AsyncIterator[ObjectMetadata]:
        """Yield every object matching prefix, following pagination to the end."""
        ...
