"""Dependencies for key-value endpoints."""

from __future__ import annotations

import json
from typing import Annotated

from fastapi import Depends, Request
from pydantic import ValidationError

from remote_kv.core.exceptions import BadRequestException

from .schemas import SET_REQUIRED_MESSAGE, SetRequest
from .service import KeyValueService


def get_kv_service(request: Request) -> KeyValueService:
    """Return the service built at app creation."""
    return request.app.state.kv_service


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def _reject_constant(name: str) -> float:
    msg = f"{name} is not valid JSON"
    raise ValueError(msg)


async def parse_set_request(request: Request) -> SetRequest:
    """Parse and validate the ``POST /set`` body.

    Every way the body can be unusable (wrong content type, invalid JSON,
    not an object, missing key, non-string value) yields the same 400.
    """
    if not _is_json_content_type(request.headers.get("content-type", "")):
        raise BadRequestException(SET_REQUIRED_MESSAGE, detail="Body is not JSON")

    try:
        payload = json.loads(await request.body(), parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        raise BadRequestException(SET_REQUIRED_MESSAGE, detail=f"Malformed JSON body: {e}") from e

    if not isinstance(payload, dict):
        raise BadRequestException(SET_REQUIRED_MESSAGE, detail="JSON body is not an object")

    try:
        return SetRequest.model_validate(payload)
    except ValidationError as e:
        raise BadRequestException(
            SET_REQUIRED_MESSAGE,
            detail="Invalid set request",
            extra={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


KeyValueServiceDep = Annotated[KeyValueService, Depends(get_kv_service)]
SetRequestDep = Annotated[SetRequest, Depends(parse_set_request)]
