"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class. Every exception
    maps to exactly one HTTP status code and one stable public error token;
    the token is the only thing a client ever sees. ``detail`` and ``extra``
    are for logs.

    Attributes:
        status_code: HTTP status code for the error.
        error: Public error token rendered as ``{"error": error}``.
        detail: Human-readable message for logs (defaults to ``error``).
        extra: Additional context-specific information about the error.

    Example:
            raise AppException(
            status_code=404,
            error="not_found",
            detail="Object users/alice/a does not exist",
            extra={"object_name": "users/alice/a"},
        )
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            error: Public error token.
            detail: Log-only message describing the failure.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.error = error
        self.detail = detail or error
        self.extra = extra or {}
        super().__init__(self.detail)


class BadRequestException(AppException):
    """Exception raised when required request fields are missing or invalid.

    Example:
            raise BadRequestException("key required")
    """

    def __init__(
        self,
        error: str,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=400, error=error, detail=detail, extra=extra)


class UnauthorizedException(AppException):
    """Exception raised when the bearer token is missing or wrong.

    The public message never says which of the two happened.
    """

    def __init__(
        self,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=401, error="unauthorized", detail=detail, extra=extra)


class NotFoundException(AppException):
    """Exception raised when a requested key does not exist.

    Example:
            raise NotFoundException(
            detail="Key a not found",
            extra={"object_name": "a"},
        )
    """

    def __init__(
        self,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=404, error="not_found", detail=detail, extra=extra)


class PayloadTooLargeException(AppException):
    """Exception raised when a request body exceeds the configured limit."""

    def __init__(
        self,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=413, error="payload_too_large", detail=detail, extra=extra)

