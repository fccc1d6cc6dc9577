"""Tests for observability module."""

import json
import logging
import time

import pytest

from recordsql.observability import (
    LogEntry,
    LogLevel,
    StructuredFormatter,
    StructuredLogger,
    Timer,
    configure_logging,
    get_logger,
)


def _emit_from_helper(logger: StructuredLogger) -> None:
    logger.info("from helper", context={"key": "value"})


class TestLogEntry:
    """Tests for LogEntry."""

    def test_to_json_basic(self) -> None:
        """to_json produces valid JSON."""
        entry = LogEntry(
            level=LogLevel.INFO,
            message="Test message",
            timestamp="2024-01-01T00:00:00Z",
            logger="test",
        )
        result = json.loads(entry.to_json())

        assert result["level"] == "INFO"
        assert result["message"] == "Test message"
        assert result["timestamp"] == "2024-01-01T00:00:00Z"
        assert result["logger"] == "test"
        assert "caller" not in result

    def test_to_json_with_caller_and_context(self) -> None:
        """to_json includes caller and context."""
        entry = LogEntry(
            level=LogLevel.INFO,
            message="Insert successfully",
            timestamp="2024-01-01T00:00:00Z",
            logger="recordsql.session",
            caller="session.insert",
            context={"id": 7},
        )
        result = json.loads(entry.to_json())

        assert result["caller"] == "session.insert"
        assert result["context"]["id"] == 7

    def test_to_json_with_error(self) -> None:
        """to_json includes error info."""
        entry = LogEntry(
            level=LogLevel.ERROR,
            message="Failed",
            timestamp="2024-01-01T00:00:00Z",
            logger="test",
            error={"type": "ExecError", "message": "bad value"},
        )
        result = json.loads(entry.to_json())

        assert result["error"]["type"] == "ExecError"
        assert result["error"]["message"] == "bad value"

    def test_to_json_with_duration(self) -> None:
        """to_json includes duration."""
        entry = LogEntry(
            level=LogLevel.DEBUG,
            message="SELECT 1",
            timestamp="2024-01-01T00:00:00Z",
            logger="test",
            duration_ms=123.45,
        )
        result = json.loads(entry.to_json())

        assert result["duration_ms"] == 123.45


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="session.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=kwargs.pop("exc_info", None),
            func=kwargs.pop("func", None),
        )
        for key, value in kwargs.items():
            setattr(record, key, value)
        return record

    def test_formats_as_json(self) -> None:
        """Formats log record as JSON."""
        parsed = json.loads(StructuredFormatter().format(self._record()))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "test"
        assert "timestamp" in parsed

    def test_includes_caller(self) -> None:
        """Caller is module.function of the emitting code."""
        parsed = json.loads(StructuredFormatter().format(self._record(func="insert")))
        assert parsed["caller"] == "session.insert"

    def test_includes_context_and_duration(self) -> None:
        record = self._record(context={"rows": 2}, duration_ms=1.5)
        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["context"] == {"rows": 2}
        assert parsed["duration_ms"] == 1.5

    def test_includes_exception(self) -> None:
        try:
            raise ValueError("bad value")
        except ValueError as e:
            record = self._record(exc_info=(type(e), e, e.__traceback__))

        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["error"] == {"type": "ValueError", "message": "bad value"}


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_info_logs_at_info_level(self, caplog: pytest.LogCaptureFixture) -> None:
        """Info method logs at INFO level."""
        logger = StructuredLogger("test.logger", LogLevel.DEBUG)

        with caplog.at_level(logging.INFO, logger="test.logger"):
            logger.info("Test message")

        assert len(caplog.records) == 1
        assert caplog.records[0].levelname == "INFO"

    def test_error_logs_at_error_level(self, caplog: pytest.LogCaptureFixture) -> None:
        """Error method logs at ERROR level."""
        logger = StructuredLogger("test.error", LogLevel.DEBUG)

        with caplog.at_level(logging.ERROR, logger="test.error"):
            logger.error("Error message", error=RuntimeError("boom"))

        assert len(caplog.records) == 1
        assert caplog.records[0].levelname == "ERROR"
        assert caplog.records[0].exc_info[0] is RuntimeError

    def test_record_attributed_to_caller(self, caplog: pytest.LogCaptureFixture) -> None:
        """The record names the function that called the logger."""
        logger = StructuredLogger("test.caller", LogLevel.DEBUG)

        with caplog.at_level(logging.INFO, logger="test.caller"):
            _emit_from_helper(logger)

        record = caplog.records[0]
        assert record.funcName == "_emit_from_helper"
        assert record.context == {"key": "value"}

    def test_debug_carries_duration(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = StructuredLogger("test.debug", LogLevel.DEBUG)

        with caplog.at_level(logging.DEBUG, logger="test.debug"):
            logger.debug("SELECT 1", duration_ms=2.0)

        assert caplog.records[0].duration_ms == 2.0


class TestTimer:
    """Tests for Timer."""

    def test_measures_duration(self) -> None:
        """Measures elapsed time."""
        with Timer() as timer:
            time.sleep(0.05)

        assert timer.duration_ms >= 40  # Allow some variance
        assert timer.duration_ms < 200


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configures_package_logger(self) -> None:
        """Configures the package logger."""
        configure_logging(level=LogLevel.DEBUG, format="json")

        root = logging.getLogger("recordsql")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_text_format(self) -> None:
        """Text format names the calling function."""
        configure_logging(level=LogLevel.WARNING, format="text")

        root = logging.getLogger("recordsql")
        assert root.level == logging.WARNING
        assert "%(funcName)s" in root.handlers[0].formatter._fmt

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("recordsql").handlers) == 1

    def test_get_logger_returns_structured_logger(self) -> None:
        """get_logger returns StructuredLogger."""
        logger = get_logger("test.module")
        assert isinstance(logger, StructuredLogger)
