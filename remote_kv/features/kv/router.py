"""Key-value API endpoints.

Every route here sits behind the bearer token gate. Failures are raised as
``AppException`` subclasses and rendered by the app's exception handlers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from remote_kv.core.dependencies.auth import require_bearer_token
from remote_kv.core.exceptions import BadRequestException

from .dependencies import KeyValueServiceDep, SetRequestDep
from .schemas import (
    KEY_REQUIRED_MESSAGE,
    SET_REQUIRED_MESSAGE,
    ErrorResponse,
    KeysResponse,
    OkResponse,
    ValueResponse,
)

router = APIRouter(tags=["kv"], dependencies=[Depends(require_bearer_token)])

_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or wrong bearer token"},
    500: {"model": ErrorResponse, "description": "Storage backend failure"},
}

KeyQuery = Annotated[str | None, Query(description="Key within the namespace")]
UserQuery = Annotated[str | None, Query(description="Owner namespace")]


def _require_key(key: str | None) -> str:
    if not key:
        raise BadRequestException(KEY_REQUIRED_MESSAGE)
    return key


@router.get(
    "/get",
    response_model=ValueResponse,
    summary="Read a value",
    description="Return the value as JSON, or as raw text when Accept includes text/plain.",
    responses={
        200: {"content": {"text/plain": {}}},
        400: {"model": ErrorResponse, "description": KEY_REQUIRED_MESSAGE},
        404: {"model": ErrorResponse, "description": "Key does not exist"},
        **_ERRORS,
    },
)
async def get_value(
    request: Request,
    service: KeyValueServiceDep,
    key: KeyQuery = None,
    user: UserQuery = None,
) -> ValueResponse | PlainTextResponse:
    value = await service.get(_require_key(key), user)
    if "text/plain" in request.headers.get("accept", ""):
        return PlainTextResponse(value)
    return ValueResponse(value=value)


@router.post(
    "/set",
    response_model=OkResponse,
    summary="Write a value",
    description="Create or overwrite a key. The value must be a JSON string.",
    responses={400: {"model": ErrorResponse, "description": SET_REQUIRED_MESSAGE}, **_ERRORS},
)
async def set_value(body: SetRequestDep, service: KeyValueServiceDep) -> OkResponse:
    await service.set(body.key, body.value, body.user)
    return OkResponse()


@router.delete(
    "/delete",
    response_model=OkResponse,
    summary="Delete a value",
    description="Remove a key. Deleting a missing key succeeds.",
    responses={400: {"model": ErrorResponse, "description": KEY_REQUIRED_MESSAGE}, **_ERRORS},
)
async def delete_value(
    service: KeyValueServiceDep,
    key: KeyQuery = None,
    user: UserQuery = None,
) -> OkResponse:
    await service.delete(_require_key(key), user)
    return OkResponse()


@router.get(
    "/list",
    response_model=KeysResponse,
    summary="List keys",
    description="List every key in the namespace that starts with prefix.",
    responses=_ERRORS,
)
async def list_keys(
    service: KeyValueServiceDep,
    prefix: Annotated[str, Query(description="Key prefix filter")] = "",
    user: UserQuery = None,
) -> KeysResponse:
    keys = await service.list_keys(prefix, user)
    return KeysResponse(keys=keys)
