"""Object storage infrastructure.

Provides the StorageBackend protocol, the GCS and S3 implementations, the
backend factory, storage exceptions and Prometheus storage metrics.

Quick Start:
    from remote_kv.infra.storage import create_storage_backend

    backend = create_storage_backend(settings.storage)
    await backend.startup()
"""

from __future__ import annotations

from .backends import ObjectMetadata, StorageBackend, UploadResult, create_storage_backend
from .exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
    StoragePermissionError,
    StorageTimeoutError,
)

__all__ = [
    "ObjectMetadata",
    "StorageBackend",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StorageTimeoutError",
    "UploadResult",
    "create_storage_backend",
]
