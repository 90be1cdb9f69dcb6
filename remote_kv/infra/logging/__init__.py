"""Logging infrastructure.

Structured logging with JSONL output, contextvars-based context injection and
a QueueHandler + QueueListener pair for non-blocking I/O.

Basic usage:
    from remote_kv.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123")
    logger.info("Processing request")  # Includes request_id
"""

from __future__ import annotations

from .config import configure_logging, setup_logging, shutdown
from .context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from .formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
