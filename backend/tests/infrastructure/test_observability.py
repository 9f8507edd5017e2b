"""Structured logging - JSON lines, portal extras and handler setup."""

import json
import logging

from registrations.infrastructure.observability import (
    JSONFormatter, log_duration, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "registrations.test", logging.INFO, __file__, 1, "hello %s", ("world",), None,
    )
    record.__dict__.update(extra)
    return record


def test_formatter_emits_core_fields():
    line = json.loads(JSONFormatter().format(_record()))
    assert line["message"] == "hello world"
    assert line["level"] == "INFO"
    assert line["service"] == "registration-portal-api"
    assert "record_id" not in line


def test_formatter_includes_known_extras_only():
    line = json.loads(JSONFormatter().format(
        _record(record_id="abc", error_code="PERSISTENCE_ERROR", secret="x"),
    ))
    assert line["record_id"] == "abc"
    assert line["error_code"] == "PERSISTENCE_ERROR"
    assert "secret" not in line


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("INFO", "text")
        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.INFO
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)


def test_log_duration_reports_elapsed_ms(caplog):
    logger = logging.getLogger("registrations.timing")
    with caplog.at_level(logging.DEBUG, logger="registrations.timing"):
        with log_duration(logger, "work done", operation="create"):
            pass

    [entry] = caplog.records
    assert entry.operation == "create"
    assert entry.duration_ms >= 0
