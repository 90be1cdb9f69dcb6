"""Storage-specific exceptions for object storage operations.

Every storage failure is rendered to clients as 500 ``{"error": "internal"}``;
the ``code`` and ``metadata`` only reach the logs. Not-found is the one
outcome callers inspect, which is why it has its own class.

Example:
    ```python
    from remote_kv.infra.storage.exceptions import map_boto_error

    try:
        await client.get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        raise map_boto_error(e, operation="download", key=key) from e
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from remote_kv.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError
    from google.api_core.exceptions import GoogleAPICallError


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        code: Error code identifier for logs and metrics.
        message: Human-readable error message (log only).
        extra: Additional context (bucket, key, SDK error code).

    Example:
        ```python
        raise StorageError(
            message="Failed to connect to storage backend",
            code="STORAGE_CONNECTION_ERROR",
            metadata={"backend": "gcs"},
        )
        ```
    """

    def __init__(
        self,
        message: str,
        code: str = "STORAGE_ERROR",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error message.
            code: Error code for programmatic handling.
            metadata: Additional error context.
        """
        self.code = code
        self.message = message
        super().__init__(
            status_code=500,
            error="internal",
            detail=message,
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Exception raised when the backend cannot be built from the settings."""

    def __init__(
        self,
        message: str = "Storage is not configured",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="STORAGE_NOT_CONFIGURED", metadata=metadata)


class StorageFileNotFoundError(StorageError):
    """Exception raised when a requested object does not exist.

    Example:
        ```python
        raise StorageFileNotFoundError(
            f"Object not found: {key}",
            metadata={"bucket": bucket, "key": key},
        )
        ```
    """

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="STORAGE_NOT_FOUND", metadata=metadata)


class StoragePermissionError(StorageError):
    """Exception raised when the backend rejects our credentials."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="STORAGE_PERMISSION_DENIED", metadata=metadata)


class StorageTimeoutError(StorageError):
    """Exception raised when a storage call exceeds its deadline."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code="STORAGE_TIMEOUT", metadata=metadata)


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map boto3 ClientError to domain-specific StorageError.

    Args:
        error: The boto3 ClientError exception to map.
        operation: The storage operation being performed (e.g., "upload", "download").
        key: Optional object key being operated on.

    Returns:
        StorageError: Appropriate domain-specific storage exception.

    Error Code Mappings:
        - NoSuchKey, 404 -> StorageFileNotFoundError
        - AccessDenied, ExpiredToken, InvalidAccessKeyId -> StoragePermissionError
        - RequestTimeout, SlowDown -> StorageTimeoutError
        - Others -> StorageError
    """
    error_code = error.response.get("Error", {}).get("Code", "Unknown")
    error_message = error.response.get("Error", {}).get("Message", str(error))

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": error_code,
        "aws_error_message": error_message,
        "request_id": error.response.get("ResponseMetadata", {}).get("RequestId"),
    }
    if key:
        metadata["key"] = key

    message = f"{operation.capitalize()} failed: {error_message}"

    # head_object reports a bare "404" without a body
    if error_code in {"NoSuchKey", "404", "NotFound"}:
        return StorageFileNotFoundError(message=message, metadata=metadata)

    if error_code in {
        "AccessDenied",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidToken",
        "TokenRefreshRequired",
        "403",
    }:
        return StoragePermissionError(message=message, metadata=metadata)

    if error_code in {"RequestTimeout", "RequestTimeTooSkewed", "SlowDown"}:
        return StorageTimeoutError(
            message=f"{operation.capitalize()} timed out: {error_message}",
            metadata=metadata,
        )

    return StorageError(message=message, metadata=metadata)


def map_gcs_error(
    error: GoogleAPICallError,
    operation: str,
    key: str | None = None,
) -> StorageError:
    """Map a google-api-core error to domain-specific StorageError.

    Args:
        error: The google.api_core exception to map.
        operation: The storage operation being performed.
        key: Optional object name being operated on.

    Returns:
        StorageError: Appropriate domain-specific storage exception.

    Status Mappings:
        - 404 -> StorageFileNotFoundError
        - 401, 403 -> StoragePermissionError
        - 408, 504 -> StorageTimeoutError
        - Others -> StorageError
    """
    status = getattr(error, "code", None)
    metadata: dict[str, Any] = {
        "operation": operation,
        "gcs_status": status,
        "gcs_error_message": getattr(error, "message", str(error)),
    }
    if key:
        metadata["key"] = key

    message = f"{operation.capitalize()} failed: {error}"

    if status == 404:
        return StorageFileNotFoundError(message=message, metadata=metadata)
    if status in {401, 403}:
        return StoragePermissionError(message=message, metadata=metadata)
    if status in {408, 504}:
        return StorageTimeoutError(
            message=f"{operation.capitalize()} timed out: {error}",
            metadata=metadata,
        )
    return StorageError(message=message, metadata=metadata)
