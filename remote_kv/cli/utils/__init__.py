"""CLI utilities for running async operations and formatting output."""

from remote_kv.cli.utils.async_runner import coro
from remote_kv.cli.utils.formatters import error, info, success, warning

__all__ = [
    "coro",
    "error",
    "info",
    "success",
    "warning",
]
