"""Request size limit middleware."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from remote_kv.core.exceptions import PayloadTooLargeException
from remote_kv.infra.metrics.prometheus import request_size_limit_rejections_total

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestSizeLimitMiddleware:
    """Limit the size of incoming request bodies.

    Requests whose Content-Length exceeds ``max_size`` are answered with 413
    before the app runs. Bodies without a usable Content-Length are counted
    while the handler reads them; crossing the limit raises
    ``PayloadTooLargeException`` inside the handler, which the exception
    handlers render as the same 413.
    """

    def __init__(self, app: ASGIApp, max_size: int = 1024 * 1024) -> None:
        """Initialize middleware.

        Args:
            app: ASGI application.
            max_size: Maximum request body size in bytes.
        """
        self.app = app
        self.max_size = max_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = self._content_length(scope)
        if content_length is not None and content_length > self.max_size:
            request_size_limit_rejections_total.labels(
                endpoint=scope["path"], method=scope["method"]
            ).inc()
            await send(
                {
                    "type": "http.response.start",
                    "status": 413,
                    "headers": [[b"content-type", b"application/json"]],
                }
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": json.dumps({"error": "payload_too_large"}).encode(),
                }
            )
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_size:
                    request_size_limit_rejections_total.labels(
                        endpoint=scope["path"], method=scope["method"]
                    ).inc()
                    raise PayloadTooLargeException(
                        detail=f"Request body exceeds maximum {self.max_size} bytes",
                        extra={"max_size": self.max_size},
                    )
            return message

        await self.app(scope, limited_receive, send)

    @staticmethod
    def _content_length(scope: Scope) -> int | None:
        for header_name, header_value in scope.get("headers", []):
            if header_name == b"content-length":
                try:
                    return int(header_value.decode())
                except (ValueError, UnicodeDecodeError):
                    # Invalid content-length header, count while streaming
                    return None
        return None
