"""Context management for structured logging.

Provides automatic context injection into log records using contextvars, so
the request ID, method and path of the request being served end up in every
log line emitted while handling it, without passing them around explicitly.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

# Each async task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for current async task/thread.

    Args:
        **kwargs: Key-value pairs to add to logging context.

    Example:
        ```python
        # In middleware
        set_log_context(request_id="abc-123", path="/get")

        logger.info("Reading key")  # Includes request_id and path
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for current async task/thread."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that injects the contextvars log context into LogRecord.

    Fields already present on the record (for example from ``extra=``) win
    over context values.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record.

        Args:
            record: The log record to enhance with context.

        Returns:
            True (always allow the record to be logged).
        """
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True
