"""Tests for structured logging: context, JSON formatter and queue setup."""

from __future__ import annotations

import json
import logging
from logging.handlers import QueueHandler
from pathlib import Path

import pytest

from remote_kv.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    configure_logging,
    get_log_context,
    set_log_context,
    shutdown,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("remote_kv.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _reset_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContext:
    def test_set_and_clear(self):
        set_log_context(request_id="abc")
        set_log_context(path="/get")

        assert get_log_context() == {"request_id": "abc", "path": "/get"}

        clear_log_context()
        assert get_log_context() == {}

    def test_filter_injects_context(self):
        set_log_context(request_id="abc", method="GET")
        record = _record()

        assert ContextInjectingFilter().filter(record) is True
        assert record.request_id == "abc"
        assert record.method == "GET"

    def test_explicit_extra_wins(self):
        set_log_context(request_id="from-context")
        record = _record(request_id="from-extra")

        ContextInjectingFilter().filter(record)

        assert record.request_id == "from-extra"


class TestJSONFormatter:
    def test_formats_single_line_json(self):
        formatter = JSONFormatter(static={"service": "remote-kv"})

        line = formatter.format(_record("stored %s", object_name="kv/a"))
        data = json.loads(line)

        assert data["message"] == "stored %s"
        assert data["level"] == "INFO"
        assert data["logger"] == "remote_kv.test"
        assert data["service"] == "remote-kv"
        assert data["object_name"] == "kv/a"
        assert data["timestamp"].endswith("Z")
        assert "\n" not in line

    def test_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            import sys

            record = logging.LogRecord(
                "remote_kv.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in data["exception"]

    def test_non_serializable_extra(self):
        data = json.loads(JSONFormatter().format(_record(path=Path("/tmp/x"))))

        assert data["path"] == "/tmp/x"


class TestConfigureLogging:
    def test_writes_json_lines_to_file(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "kv.jsonl"
        try:
            configure_logging(
                log_level="INFO",
                file_path=log_file,
                json_logs=True,
                console_enabled=False,
                capture_warnings=False,
            )
            set_log_context(request_id="req-42")
            logging.getLogger("remote_kv.test").info("Stored key", extra={"object_name": "kv/a"})
        finally:
            shutdown()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        data = json.loads(lines[-1])
        assert data["message"] == "Stored key"
        assert data["request_id"] == "req-42"
        assert data["object_name"] == "kv/a"
        assert data["service"] == "remote-kv"

    def test_shutdown_removes_queue_handler(self, tmp_path: Path):
        root = logging.getLogger()

        configure_logging(file_path=tmp_path / "kv.log", console_enabled=False, capture_warnings=False)
        assert any(isinstance(h, QueueHandler) for h in root.handlers)

        shutdown()
        assert not any(isinstance(h, QueueHandler) for h in root.handlers)
