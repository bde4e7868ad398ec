"""Tests for structured JSON logging."""

import json
import logging
import os
import sys

from scanworker.core.logging import JSONFormatter, setup_logging


def _record(msg="test", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="scanworker.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_json_formatter_produces_valid_json():
    fmt = JSONFormatter()
    record = logging.LogRecord(
        name="scanworker.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    data = json.loads(fmt.format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "scanworker.test"
    assert data["msg"] == "hello world"
    assert "ts" in data


def test_json_formatter_includes_scan_context():
    record = _record()
    record.scan_id = "s-42"  # type: ignore[attr-defined]
    record.tool = "nuclei"  # type: ignore[attr-defined]
    data = json.loads(JSONFormatter().format(record))
    assert data["scan_id"] == "s-42"
    assert data["tool"] == "nuclei"


def test_json_formatter_omits_missing_context():
    data = json.loads(JSONFormatter().format(_record()))
    assert "scan_id" not in data
    assert "tool" not in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed", logging.ERROR, sys.exc_info())
    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exc"]


def test_setup_logging_uses_log_level_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging()
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_defaults_to_info():
    os.environ.pop("LOG_LEVEL", None)
    setup_logging()
    assert logging.getLogger().level == logging.INFO


def test_log_output_is_json(capsys):
    setup_logging()
    logging.getLogger("test.structured").info("test message", extra={"scan_id": "abc"})
    data = json.loads(capsys.readouterr().out.strip())
    assert data["msg"] == "test message"
    assert data["scan_id"] == "abc"
