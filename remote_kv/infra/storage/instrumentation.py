"""Storage operation instrumentation with Prometheus metrics."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from . import metrics

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def track_storage_operation(
    operation: str,
    key: str | None = None,
    size_bytes: int | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """Time a storage operation and record its outcome.

    The yielded dict may be updated by the caller; a ``result_size`` entry
    overrides ``size_bytes`` in the recorded metrics.

    Args:
        operation: Operation name (upload, download, delete, exists, list)
        key: Object name, for debug logging
        size_bytes: Value size in bytes (for uploads)

    Example:
        async with track_storage_operation("download", key=name) as ctx:
            data = await backend.download_object(name)
            ctx["result_size"] = len(data)
    """
    start_time = time.perf_counter()
    context: dict[str, Any] = {}

    try:
        yield context
    except Exception as e:
        metrics.record_operation_error(
            operation=operation,
            error_type=type(e).__name__,
            duration_seconds=time.perf_counter() - start_time,
        )
        raise

    duration = time.perf_counter() - start_time
    metrics.record_operation_success(
        operation=operation,
        duration_seconds=duration,
        size_bytes=context.get("result_size", size_bytes),
    )
    logger.debug(
        "Storage operation completed",
        extra={"operation": operation, "key": key, "duration_seconds": round(duration, 4)},
    )
