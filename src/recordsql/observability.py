"""Logging for recordsql.

Records name the function that logged them (``caller``), and statement logs
carry ``duration_ms``. Nothing is installed on import; call
``configure_logging`` to attach a handler to the ``recordsql`` logger.
"""

import json
import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

ROOT_LOGGER = "recordsql"

TEXT_FORMAT = "%(asctime)s [%(levelname)s]:[%(module)s.%(funcName)s]: %(message)s"

# Frames between the StructuredLogger method's caller and logging.Logger.log
_CALLER_STACKLEVEL = 3


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LogEntry:
    """One JSON log line."""

    level: LogLevel
    message: str
    timestamp: str
    logger: str
    caller: str | None = None
    context: dict[str, Any] = field(default_factory=dict)
    error: dict[str, Any] | None = None
    duration_ms: float | None = None

    def to_json(self) -> str:
        data: dict[str, Any] = {
            "level": self.level.value,
            "message": self.message,
            "timestamp": self.timestamp,
            "logger": self.logger,
        }
        optional = {
            "caller": self.caller,
            "context": self.context,
            "error": self.error,
        }
        data.update((key, value) for key, value in optional.items() if value)
        if self.duration_ms is not None:
            data["duration_ms"] = self.duration_ms
        return json.dumps(data, default=str)


def _error_fields(record: logging.LogRecord) -> dict[str, Any] | None:
    if not record.exc_info:
        return None
    exc_type, exc, _ = record.exc_info
    return {
        "type": exc_type.__name__ if exc_type else "Unknown",
        "message": str(exc) if exc else "",
    }


class StructuredFormatter(logging.Formatter):
    """Renders a record as a ``LogEntry`` JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        context = getattr(record, "context", None)
        caller = None
        if record.funcName and record.funcName != "<module>":
            caller = f"{record.module}.{record.funcName}"

        return LogEntry(
            level=LogLevel(record.levelname),
            message=record.getMessage(),
            timestamp=datetime.now(timezone.utc).isoformat(),
            logger=record.name,
            caller=caller,
            context=dict(context) if isinstance(context, dict) else {},
            error=_error_fields(record),
            duration_ms=getattr(record, "duration_ms", None),
        ).to_json()


class StructuredLogger:
    """``logging.Logger`` front end taking ``context``, ``error`` and ``duration_ms``.

    Example:
        logger = get_logger(__name__)
        logger.debug(stmt.text, context={"rows": 3}, duration_ms=0.8)
        logger.error("Insert failed", error=e)
    """

    def __init__(self, name: str, level: LogLevel | None = None) -> None:
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level.value)

    def _log(
        self,
        level: LogLevel,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
        duration_ms: float | None = None,
    ) -> None:
        extra: dict[str, Any] = {}
        if context:
            extra["context"] = context
        if duration_ms is not None:
            extra["duration_ms"] = duration_ms
        exc_info = (type(error), error, error.__traceback__) if error else None
        self.logger.log(
            logging.getLevelName(level.value),
            message,
            exc_info=exc_info,
            extra=extra,
            stacklevel=_CALLER_STACKLEVEL,
        )

    def debug(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._log(LogLevel.DEBUG, message, context, duration_ms=duration_ms)

    def info(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._log(LogLevel.INFO, message, context, duration_ms=duration_ms)

    def warning(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._log(LogLevel.WARNING, message, context, error, duration_ms)

    def error(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        error: Exception | None = None,
        duration_ms: float | None = None,
    ) -> None:
        self._log(LogLevel.ERROR, message, context, error, duration_ms)


class Timer:
    """Wall-clock timer for a ``with`` block, read back as ``duration_ms``."""

    def __init__(self) -> None:
        self.start_time: float = 0
        self.end_time: float = 0

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time) * 1000

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end_time = time.perf_counter()


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    format: str = "json",
) -> None:
    """Send ``recordsql`` logs to stdout, replacing any handlers on it.

    Args:
        level: Minimum level for the package logger
        format: "json" for ``StructuredFormatter`` lines, "text" for
            ``TEXT_FORMAT``
    """
    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(LogLevel(level).value)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    package_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
