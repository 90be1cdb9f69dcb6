"""Storage metrics for Prometheus monitoring.

All metrics are registered with the shared REGISTRY so they are exposed via
the /metrics endpoint.

Usage:
    from remote_kv.infra.storage.metrics import (
        record_operation_success,
        record_operation_error,
    )

    record_operation_success("upload", duration_seconds=0.12, size_bytes=42)
    record_operation_error("download", "StorageTimeoutError", duration_seconds=5.0)
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from remote_kv.infra.metrics.prometheus import REGISTRY

# Covers latency from 10ms to 30s for network operations
STORAGE_LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)

# Values are capped by the request body limit, 64B to 1MB
STORAGE_SIZE_BUCKETS = (64, 256, 1024, 10240, 102400, 1048576)

storage_operations_total = Counter(
    "storage_operations_total",
    "Total storage operations",
    ["operation", "status"],  # operation: upload/download/delete/list/exists, status: success/error
    registry=REGISTRY,
)

storage_operation_duration_seconds = Histogram(
    "storage_operation_duration_seconds",
    "Storage operation duration in seconds",
    ["operation"],
    buckets=STORAGE_LATENCY_BUCKETS,
    registry=REGISTRY,
)

storage_object_size_bytes = Histogram(
    "storage_object_size_bytes",
    "Size of values uploaded/downloaded in bytes",
    ["operation"],
    buckets=STORAGE_SIZE_BUCKETS,
    registry=REGISTRY,
)

storage_errors_total = Counter(
    "storage_errors_total",
    "Storage operation errors by type",
    ["operation", "error_type"],
    registry=REGISTRY,
)


def record_operation_success(
    operation: str,
    duration_seconds: float,
    size_bytes: int | None = None,
) -> None:
    """Record a successful storage operation.

    Args:
        operation: The operation type (e.g., 'upload', 'download', 'delete')
        duration_seconds: Operation duration in seconds
        size_bytes: Optional value size in bytes for upload/download operations
    """
    storage_operations_total.labels(operation=operation, status="success").inc()
    storage_operation_duration_seconds.labels(operation=operation).observe(duration_seconds)
    if size_bytes is not None:
        storage_object_size_bytes.labels(operation=operation).observe(size_bytes)


def record_operation_error(
    operation: str,
    error_type: str,
    duration_seconds: float,
) -> None:
    """Record a failed storage operation.

    Args:
        operation: The operation type (e.g., 'upload', 'download', 'delete')
        error_type: The error class name (e.g., 'StorageTimeoutError')
        duration_seconds: Operation duration in seconds before failure
    """
    storage_operations_total.labels(operation=operation, status="error").inc()
    storage_operation_duration_seconds.labels(operation=operation).observe(duration_seconds)
    storage_errors_total.labels(operation=operation, error_type=error_type).inc()
