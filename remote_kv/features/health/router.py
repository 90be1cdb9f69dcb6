"""Liveness probe.

``/healthz`` never touches storage and never requires the bearer token, so
orchestrators can probe it without credentials.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get(
    "/healthz",
    response_class=PlainTextResponse,
    summary="Liveness probe",
    description="Always returns 200 with body 'ok' while the process serves requests",
)
async def healthz() -> PlainTextResponse:
    return PlainTextResponse("ok")
