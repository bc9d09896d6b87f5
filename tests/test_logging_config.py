"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from jobmatch.logging import ComponentLoggerAdapter, get_logger
from jobmatch.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from jobmatch.logging.context import clear_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def logger():
    """Create a test logger with handler for capturing output."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging()."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    urllib3_level = logging.getLogger("urllib3").level

    yield root_logger

    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger("urllib3").setLevel(urllib3_level)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    formatter = JSONFormatter()

    record = logger.makeRecord("jobmatch.test", logging.INFO, "test.py", 1, "Test message", (), None)
    log_obj = json.loads(formatter.format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "jobmatch.test"
    assert "timestamp" in log_obj


def test_json_formatter_with_extra_fields(logger):
    """Test JSONFormatter includes extra fields."""
    formatter = JSONFormatter()

    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Test message",
        (),
        None,
        extra={"event": "test.event", "count": 42, "flag": True, "ids": ["a", "b"]},
    )
    log_obj = json.loads(formatter.format(record))

    assert log_obj["event"] == "test.event"
    assert log_obj["count"] == 42
    assert log_obj["flag"] is True
    assert log_obj["ids"] == ["a", "b"]


def test_json_formatter_stringifies_unknown_types(logger):
    formatter = JSONFormatter()

    record = logger.makeRecord(
        "test", logging.INFO, "test.py", 1, "msg", (), None, extra={"path": object()}
    )
    log_obj = json.loads(formatter.format(record))

    assert isinstance(log_obj["path"], str)


def test_json_formatter_includes_exception(logger):
    formatter = JSONFormatter()

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logger.makeRecord("test", logging.ERROR, "test.py", 1, "Failed", (), sys.exc_info())

    log_obj = json.loads(formatter.format(record))

    assert "RuntimeError: boom" in log_obj["exc_info"]


def test_contextual_filter_adds_static_fields(logger):
    """Test ContextualFilter adds static service and environment fields."""
    context_filter = ContextualFilter(environment="test")

    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
    context_filter.filter(record)

    assert record.service == SERVICE_NAME
    assert record.environment == "test"


def test_contextual_filter_adds_context_fields(logger):
    """Test ContextualFilter adds fields from log context."""
    context_filter = ContextualFilter()

    with log_context(run_id="abc123", source="jsearch"):
        record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
        context_filter.filter(record)

    assert record.run_id == "abc123"
    assert record.source == "jsearch"


def test_contextual_filter_explicit_extra_wins(logger):
    """Test that extra fields passed at the call site override context fields."""
    context_filter = ContextualFilter()

    with log_context(batch=1):
        record = logger.makeRecord(
            "test", logging.INFO, "test.py", 1, "Test message", (), None, extra={"batch": 7}
        )
        context_filter.filter(record)

    assert record.batch == 7


def test_json_formatter_with_context(logger):
    """Test full pipeline: context + filter + JSON formatter."""
    formatter = JSONFormatter()
    context_filter = ContextualFilter(environment="test")

    with log_context(run_id="abc123", source="adzuna"):
        record = logger.makeRecord(
            "test",
            logging.INFO,
            "test.py",
            1,
            "Fetched 3 jobs from Adzuna",
            (),
            None,
            extra={"event": "adapter.fetch.completed"},
        )
        context_filter.filter(record)
        log_obj = json.loads(formatter.format(record))

    assert log_obj["message"] == "Fetched 3 jobs from Adzuna"
    assert log_obj["event"] == "adapter.fetch.completed"
    assert log_obj["service"] == "jobmatch-pipeline"
    assert log_obj["environment"] == "test"
    assert log_obj["run_id"] == "abc123"
    assert log_obj["source"] == "adzuna"


def test_key_value_formatter_basic(logger):
    """Test KeyValueFormatter produces readable output."""
    formatter = KeyValueFormatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
    output = formatter.format(record)

    assert "[INFO]" in output
    assert "Test message" in output


def test_key_value_formatter_with_extras(logger):
    """Test KeyValueFormatter includes extra fields as key=value pairs."""
    formatter = KeyValueFormatter("%(message)s")

    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Test message",
        (),
        None,
        extra={"event": "test.event", "count": 42, "ok": False, "error": None, "reason": "two words"},
    )
    output = formatter.format(record)

    assert "event=test.event" in output
    assert "count=42" in output
    assert "ok=false" in output
    assert "error=null" in output
    assert 'reason="two words"' in output


def test_key_value_formatter_skips_static_fields(logger):
    formatter = KeyValueFormatter("%(message)s")
    context_filter = ContextualFilter(environment="test")

    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
    context_filter.filter(record)
    output = formatter.format(record)

    assert "service=" not in output
    assert "environment=" not in output


def test_configure_logging_invalid_level():
    """Test configure_logging rejects invalid log level."""
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="INVALID")


def test_configure_logging_invalid_format():
    """Test configure_logging rejects invalid format type."""
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="invalid")


def test_configure_logging_json_format(restore_root_logger):
    """Test configure_logging with JSON format."""
    configure_logging(level="INFO", format_type="json", environment="test")

    handler = restore_root_logger.handlers[0]
    assert len(restore_root_logger.handlers) == 1
    assert isinstance(handler.formatter, JSONFormatter)
    assert restore_root_logger.level == logging.INFO


def test_configure_logging_key_value_format(restore_root_logger):
    """Test configure_logging with key-value format."""
    configure_logging(level="debug", format_type="key-value", environment="test")

    handler = restore_root_logger.handlers[0]
    assert isinstance(handler.formatter, KeyValueFormatter)
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_writes_to_stderr(restore_root_logger):
    """Logs must not mix with the JSON result on stdout."""
    configure_logging(level="INFO", format_type="json")

    handler = restore_root_logger.handlers[0]
    assert handler.stream is sys.stderr


def test_configure_logging_quiets_urllib3(restore_root_logger):
    configure_logging(level="INFO")
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_timestamp_format_in_json(logger):
    """Test that JSON formatter produces correct ISO-8601 timestamp format."""
    formatter = JSONFormatter()

    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
    timestamp = json.loads(formatter.format(record))["timestamp"]

    assert timestamp.endswith("Z")
    assert "T" in timestamp
    assert len(timestamp) == 24  # 2025-11-04T10:30:00.123Z


def test_json_formatter_no_duplicate_fields(logger):
    """Test that JSON formatter doesn't duplicate standard fields in extras."""
    formatter = JSONFormatter()

    record = logger.makeRecord(
        "test", logging.INFO, "test.py", 1, "Test message", (), None, extra={"event": "test.event"}
    )
    log_obj = json.loads(formatter.format(record))

    assert "name" not in log_obj
    assert "levelno" not in log_obj
    assert log_obj["event"] == "test.event"


def test_get_logger_with_component():
    adapter = get_logger("jobmatch.test", component="scoring")

    assert isinstance(adapter, ComponentLoggerAdapter)
    msg, kwargs = adapter.process("hello", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "scoring", "event": "x"}


def test_get_logger_call_site_component_wins():
    adapter = get_logger("jobmatch.test", component="scoring")

    _, kwargs = adapter.process("hello", {"extra": {"component": "override"}})
    assert kwargs["extra"]["component"] == "override"


def test_get_logger_without_component():
    assert isinstance(get_logger("jobmatch.test"), logging.Logger)
