"""Custom logging formatters."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# LogRecord attributes that are never copied into the JSON payload
_SKIP_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)


class JSONFormatter(logging.Formatter):
    """Structured JSON Lines (JSONL) formatter with UTC timestamps.

    Formats log records as one JSON object per line, ready for ingestion by
    log aggregation systems such as Loki or Cloud Logging.

    Features:
    - UTC timestamps in ISO 8601 format with millisecond precision
    - Automatic inclusion of context from ContextInjectingFilter
    - Exception stack traces kept on a single line

    Example output:
        ```json
        {"timestamp": "2025-01-01T00:00:00.123Z", "level": "INFO", "logger": "remote_kv.features.kv.service", "message": "Stored key", "request_id": "abc-123"}
        ```
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        """Initialize JSON formatter.

        Args:
            fmt_keys: Mapping of output keys to LogRecord attributes.
                Default: {"level": "levelname", "logger": "name", "message": "message"}
            static: Static fields to include in every log record (e.g., {"service": "remote-kv"}).
        """
        super().__init__()
        self.fmt_keys = fmt_keys or {
            "level": "levelname",
            "logger": "name",
            "message": "message",
        }
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single-line JSON string."""
        record.message = record.getMessage()

        data: dict[str, Any] = {
            k: getattr(record, v, None) for k, v in self.fmt_keys.items()
        }

        data["timestamp"] = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")

        if record.stack_info:
            data["stack_trace"] = record.stack_info.replace("\n", "\\n")

        if self.static:
            data.update(self.static)

        # Extra fields from context filter or extra=
        for key, value in record.__dict__.items():
            if key not in _SKIP_KEYS and key not in data:
                data[key] = value

        return json.dumps(data, ensure_ascii=False, default=str)
