"""Tests for logging configuration and formatters."""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum

import pytest

from rescue_match.config.models import LogFormat, LogLevel
from rescue_match.logging import ComponentLoggerAdapter, get_logger
from rescue_match.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from rescue_match.logging.context import log_context


class Size(Enum):
    SMALL = "small"


@pytest.fixture
def logger():
    """Create a test logger with no handlers."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way it was after configure_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(logger, message="Test message", extra=None):
    return logger.makeRecord("test", logging.INFO, "test.py", 1, message, (), None, extra=extra)


def test_json_formatter_basic(logger):
    """JSONFormatter produces valid JSON with the mandatory fields."""
    log_obj = json.loads(JSONFormatter().format(make_record(logger)))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields(logger):
    record = make_record(
        logger,
        extra={
            "event": "match.weighted.completed",
            "result_count": 3,
            "animal_type": Size.SMALL,
            "at": datetime(2025, 1, 1, tzinfo=timezone.utc),
            "errors": ("a", "b"),
        },
    )
    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "match.weighted.completed"
    assert log_obj["result_count"] == 3
    assert log_obj["animal_type"] == "small"
    assert log_obj["at"] == "2025-01-01T00:00:00+00:00"
    assert log_obj["errors"] == ["a", "b"]


def test_json_formatter_includes_exception(logger):
    try:
        raise ValueError("boom")
    except ValueError:
        record = logger.makeRecord(
            "test", logging.ERROR, "test.py", 1, "Failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in log_obj["exc_info"]


def test_key_value_formatter(logger):
    formatter = KeyValueFormatter("%(levelname)s %(message)s")
    record = make_record(
        logger,
        extra={"event": "match.pool.loaded", "pool_size": 4, "note": "two words", "ok": True},
    )
    record.service = "rescue-match"

    output = formatter.format(record)

    assert output.startswith("INFO Test message ")
    assert "event=match.pool.loaded" in output
    assert "pool_size=4" in output
    assert 'note="two words"' in output
    assert "ok=true" in output
    assert "service=" not in output


def test_contextual_filter_adds_context(logger):
    contextual_filter = ContextualFilter(environment="test")
    record = make_record(logger)

    with log_context(request_id="abc123", match_kind="service"):
        contextual_filter.filter(record)

    assert record.service == "rescue-match"
    assert record.environment == "test"
    assert record.request_id == "abc123"
    assert record.match_kind == "service"


def test_contextual_filter_explicit_extra_wins(logger):
    record = make_record(logger, extra={"match_kind": "priority"})

    with log_context(match_kind="weighted"):
        ContextualFilter().filter(record)

    assert record.match_kind == "priority"


def test_configure_logging_json(restore_root_logger):
    configure_logging(level=LogLevel.DEBUG, format_type=LogFormat.JSON, environment="test")

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)


def test_configure_logging_key_value(restore_root_logger):
    configure_logging(level="warning", format_type="key-value")

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, KeyValueFormatter)


def test_configure_logging_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")


def test_configure_logging_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_get_logger_with_component(caplog):
    adapter = get_logger("rescue_match.tests", component="orchestrator")
    assert isinstance(adapter, ComponentLoggerAdapter)

    with caplog.at_level(logging.INFO, logger="rescue_match.tests"):
        adapter.info("hello", extra={"event": "test.event"})

    record = caplog.records[-1]
    assert record.component == "orchestrator"
    assert record.event == "test.event"


def test_get_logger_without_component():
    assert isinstance(get_logger("rescue_match.tests"), logging.Logger)
