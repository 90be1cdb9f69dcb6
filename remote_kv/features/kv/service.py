"""Key-value operations on top of a storage backend.

Each call maps one logical operation to one or two backend calls; nothing is
cached and nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from remote_kv.core.exceptions import NotFoundException
from remote_kv.infra.storage.exceptions import StorageFileNotFoundError
from remote_kv.infra.storage.instrumentation import track_storage_operation

from .namespace import build_prefix, object_name, strip_namespace

if TYPE_CHECKING:
    from remote_kv.infra.storage.backends.protocol import StorageBackend, UploadResult

logger = logging.getLogger(__name__)

VALUE_CONTENT_TYPE = "text/plain"
VALUE_CACHE_CONTROL = "no-store"


class KeyValueService:
    """Namespaced key-value store backed by a single bucket.

    Attributes:
        backend: Started storage backend shared by all requests.
        key_prefix: Prefix prepended to every object name.

    Example:
        service = KeyValueService(backend, key_prefix="kv/")
        await service.set("a", "1", user="alice")
        assert await service.get("a", user="alice") == "1"
    """

    def __init__(self, backend: StorageBackend, key_prefix: str = "") -> None:
        self.backend = backend
        self.key_prefix = key_prefix

    async def get(self, key: str, user: str | None = None) -> str:
        """Return the value stored under ``key``.

        Raises:
            NotFoundException: If the key does not exist.
            StorageError: On any other backend failure.
        """
        name = object_name(self.key_prefix, key, user)

        async with track_storage_operation("exists", key=name):
            exists = await self.backend.object_exists(name)
        if not exists:
            raise NotFoundException(detail=f"Object {name} does not exist", extra={"object_name": name})

        try:
            async with track_storage_operation("download", key=name) as ctx:
                data = await self.backend.download_object(name)
                ctx["result_size"] = len(data)
        except StorageFileNotFoundError as e:
            # Deleted between the existence probe and the read
            raise NotFoundException(
                detail=f"Object {name} disappeared before download",
                extra={"object_name": name},
            ) from e

        return data.decode("utf-8", errors="replace")

    async def set(self, key: str, value: str, user: str | None = None) -> UploadResult:
        """Create or overwrite ``key`` with ``value``."""
        name = object_name(self.key_prefix, key, user)
        data = value.encode("utf-8")

        async with track_storage_operation("upload", key=name, size_bytes=len(data)):
            result = await self.backend.upload_object(
                name,
                data,
                content_type=VALUE_CONTENT_TYPE,
                cache_control=VALUE_CACHE_CONTROL,
            )

        logger.info("Stored key", extra={"object_name": name, "size_bytes": len(data)})
        return result

    async def delete(self, key: str, user: str | None = None) -> None:
        """Remove ``key``; removing a missing key is not an error."""
        name = object_name(self.key_prefix, key, user)

        async with track_storage_operation("delete", key=name):
            try:
                await self.backend.delete_object(name)
            except StorageFileNotFoundError:
                logger.debug("Key already absent", extra={"object_name": name})
                return

        logger.info("Deleted key", extra={"object_name": name})

    async def list_keys(self, prefix: str = "", user: str | None = None) -> list[str]:
        """Return every key in the namespace starting with ``prefix``.

        All listing pages are drained before returning. Keys are returned in
        backend order with the namespace removed; empty names are dropped.
        """
        namespace = build_prefix(self.key_prefix, user)
        keys: list[str] = []

        async with track_storage_operation("list", key=namespace + prefix):
            async for obj in self.backend.stream_objects(prefix=namespace + prefix):
                key = strip_namespace(obj.key, namespace)
                if key is not None:
                    keys.append(key)

        return keys
