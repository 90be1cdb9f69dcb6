"""Logging configuration setup.

Provides logging configuration using:
- dictConfig for formatters and the root level
- QueueHandler + QueueListener for non-blocking I/O
- ContextInjectingFilter for automatic context propagation
- All handlers behind the root logger (child loggers propagate)
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from .context import ContextInjectingFilter
from .formatters import JSONFormatter

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

_TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

if TYPE_CHECKING:
    from remote_kv.core.settings.logs import LoggingSettings


def shutdown() -> None:
    """Stop the QueueListener and flush pending records.

    Registered with atexit on first configuration; safe to call repeatedly.
    """
    global _log_queue, _listener, _queue_handler, _LOGGING_INITIALIZED

    if _listener is not None:
        # stop() drains everything already enqueued
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    _log_queue = None
    _LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from remote_kv.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "remote-kv",
    include_uvicorn: bool = True,
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig and the QueueHandler pattern.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_path: Path to log file. None disables file logging.
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        service_name: Static ``service`` field on every JSON record.
        include_uvicorn: Keep uvicorn access logs; when False they are raised to WARNING.
        **kwargs: Ignored extra settings.

    Example:
        from remote_kv.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    # Replace any listener from an earlier configuration
    shutdown()

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _build_formatters_config(json_logs=json_logs, service_name=service_name),
        "root": {
            "level": log_level.upper(),
            "handlers": [],
        },
        "loggers": {
            "uvicorn.access": {"level": "INFO" if include_uvicorn else "WARNING"},
        },
    }
    logging.config.dictConfig(logging_config)

    _setup_queue_logging(
        console_enabled=console_enabled,
        file_path=path,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        json_logs=json_logs,
        include_context=include_context,
        service_name=service_name,
    )


def _build_formatters_config(json_logs: bool, service_name: str) -> dict[str, Any]:
    """Build formatters configuration for dictConfig."""
    if json_logs:
        return {
            "json": {
                "()": "remote_kv.infra.logging.formatters.JSONFormatter",
                "static": {"service": service_name},
            }
        }
    return {"text": {"format": _TEXT_FORMAT, "datefmt": _TEXT_DATEFMT}}


def _make_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if json_logs:
        return JSONFormatter(static={"service": service_name})
    return logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)


def _setup_queue_logging(
    console_enabled: bool,
    file_path: Path | None,
    file_max_bytes: int,
    file_backup_count: int,
    json_logs: bool,
    include_context: bool,
    service_name: str,
) -> None:
    """Set up QueueHandler + QueueListener for non-blocking logging.

    Creates the output handlers, attaches them to a QueueListener, and gives
    the root logger a single QueueHandler. The context filter sits on the
    QueueHandler so it runs in the emitting task, where the contextvars are set.
    """
    global _log_queue, _listener, _queue_handler

    _log_queue = Queue()
    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(_make_formatter(json_logs, service_name))
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(_make_formatter(json_logs, service_name))
        handlers.append(file_handler)

    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    _queue_handler = QueueHandler(_log_queue)
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)
