"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint (bearer token required when configured)

Metrics Exposed:
    - http_requests_total / http_request_duration_seconds - per route and status
    - request_size_limit_rejections_total - bodies rejected with 413
    - storage_operations_total / storage_operation_duration_seconds - backend calls
    - storage_errors_total - backend failures by error type
    - storage_object_size_bytes - uploaded and downloaded value sizes
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from remote_kv.core.dependencies.auth import require_bearer_token
from remote_kv.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"], dependencies=[Depends(require_bearer_token)])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
