"""Backend factory for creating storage backends dynamically."""

from __future__ import annotations

from typing import TYPE_CHECKING

from remote_kv.core.settings.storage import StorageBackendType
from remote_kv.infra.storage.exceptions import StorageNotConfiguredError

if TYPE_CHECKING:
    from remote_kv.core.settings.storage import StorageSettings

    from .protocol import StorageBackend


def create_storage_backend(settings: StorageSettings) -> StorageBackend:
    """Factory function to create the configured storage backend.

    The backend is returned un-started; call ``startup()`` before use.

    Args:
        settings: Storage configuration settings

    Returns:
        Storage backend implementing StorageBackend protocol

    Raises:
        StorageNotConfiguredError: If backend type unsupported

    Example:
        backend = create_storage_backend(get_storage_settings())
        await backend.startup()
        await backend.upload_object("a", b"1", content_type="text/plain")
        await backend.shutdown()
    """
    backend_type = settings.backend

    match backend_type:
        case StorageBackendType.GCS:
            from .gcs.backend import GCSBackend

            return GCSBackend(settings)

        case StorageBackendType.S3 | StorageBackendType.MINIO:
            # Both S3 and MinIO use the same S3-compatible backend
            from .s3.backend import S3Backend

            return S3Backend(settings)

        case _:
            msg = (
                f"Unsupported storage backend: {backend_type}. "
                f"Supported backends: {', '.join([t.value for t in StorageBackendType])}"
            )
            raise StorageNotConfiguredError(msg)
