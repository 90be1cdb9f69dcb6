"""Metrics middleware for HTTP request instrumentation."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from remote_kv.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and latency per route.

    Uses the route path template when a route matched, so unknown paths do
    not create new label values.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        method = request.method
        start_time = time.perf_counter()
        status_code = 500  # Default to error in case of exception

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or "unmatched"

            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)
            http_requests_total.labels(
                method=method, endpoint=endpoint, status=status_code
            ).inc()
