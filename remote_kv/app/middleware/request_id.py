"""Request ID middleware for per-request tracking.

This middleware:
1. Extracts request ID from X-Request-ID header if present
2. Generates a new UUID if header is missing
3. Stores the ID in request.state.request_id
4. Adds the ID, method and path to logging context
5. Includes X-Request-ID in response headers
6. Cleans up logging context after request completes
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from remote_kv.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestIDMiddleware:
    """Add a unique request ID to every request and response.

    Pure ASGI implementation; no body buffering.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)
    """

    header_name = "x-request-id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        header_bytes = headers.get(self.header_name.encode("latin-1"))
        request_id = header_bytes.decode("latin-1") if header_bytes else str(uuid.uuid4())

        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        set_log_context(request_id=request_id, method=scope["method"], path=scope["path"])

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()
