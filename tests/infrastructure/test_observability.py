"""Structured Logging — JSON fields and idempotent setup."""

import json
import logging

from users_api.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "users_api.test", logging.WARNING, __file__, 1, "hello %s", ("world",),
        None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_core_fields():
    log = json.loads(JSONFormatter().format(_record()))

    assert log["level"] == "WARNING"
    assert log["logger"] == "users_api.test"
    assert log["message"] == "hello world"
    assert "timestamp" in log


def test_json_formatter_surfaces_known_extras_only():
    log = json.loads(JSONFormatter().format(
        _record(error_code="USER_NOT_FOUND", path="/api/users/1", other="x"),
    ))

    assert log["error_code"] == "USER_NOT_FOUND"
    assert log["path"] == "/api/users/1"
    assert "other" not in log


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys
        record = _record()
        record.exc_info = sys.exc_info()

    log = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in log["exception"]


def test_setup_logging_replaces_its_own_handler():
    before = list(logging.root.handlers)
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("INFO", "text")

        assert first not in logging.root.handlers
        assert second in logging.root.handlers
        assert isinstance(second.formatter, logging.Formatter)
        assert not isinstance(second.formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in list(logging.root.handlers):
            if handler not in before:
                logging.root.removeHandler(handler)
