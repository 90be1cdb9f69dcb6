"""Storage backend implementations."""

from __future__ import annotations

from .factory import create_storage_backend
from .protocol import ObjectMetadata, StorageBackend, UploadResult

__all__ = [
    "ObjectMetadata",
    "StorageBackend",
    "UploadResult",
    "create_storage_backend",
]
