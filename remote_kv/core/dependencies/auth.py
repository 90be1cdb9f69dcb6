"""Shared-secret bearer token dependency.

Usage:
    from fastapi import APIRouter, Depends
    from remote_kv.core.dependencies.auth import require_bearer_token

    router = APIRouter(dependencies=[Depends(require_bearer_token)])

The expected token comes from ``AuthSettings`` on ``app.state.settings``.
When no token is configured the dependency is a no-op.
"""

from __future__ import annotations

import secrets

from fastapi import Request

from remote_kv.core.exceptions import UnauthorizedException

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the credential after a case-sensitive ``Bearer `` prefix.

    Example:
        >>> extract_bearer_token("Bearer abc")
        'abc'
        >>> extract_bearer_token("bearer abc") is None
        True
    """
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return None


def token_matches(presented: str | None, expected: str) -> bool:
    """Compare tokens in constant time."""
    if presented is None:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


async def require_bearer_token(request: Request) -> None:
    """Reject the request unless it carries the configured bearer token.

    Raises:
        UnauthorizedException: If a token is configured and the request's
            ``Authorization`` header is missing, malformed or wrong.
    """
    auth_settings = request.app.state.settings.auth
    if not auth_settings.enabled:
        return

    presented = extract_bearer_token(request.headers.get("authorization"))
    if not token_matches(presented, auth_settings.token.get_secret_value()):
        raise UnauthorizedException(
            detail="Missing bearer token" if presented is None else "Bearer token mismatch",
            extra={"path": request.url.path},
        )
