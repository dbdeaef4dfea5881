"""
Structured logging configuration for IAMKit.

Provides consistent, structured logging across all modules
with support for different output formats and log levels.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

_RESERVED_RECORD_KEYS = frozenset(
    (
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
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    )
)


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs structured JSON logs.

    Useful for log aggregation systems like CloudWatch or Cloud Logging.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ):
        """
        Initialize structured formatter.

        Args:
            include_timestamp: Include timestamp in output
            include_level: Include log level in output
            include_logger: Include logger name in output
            include_location: Include file/line location
            extra_fields: Additional fields to include in every log
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = (
                datetime.fromtimestamp(record.created, timezone.utc)
                .isoformat()
                .replace("+00:00", "Z")
            )

        if self.include_level:
            log_data["level"] = record.levelname.lower()

        if self.include_logger:
            log_data["logger"] = record.name

        log_data["message"] = record.getMessage()

        if self.include_location:
            log_data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        log_data.update(self.extra_fields)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable logs.

    Useful for local development and interactive use.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(
        self,
        use_colors: bool = True,
        include_timestamp: bool = True,
        include_level: bool = True,
    ):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()
        self.include_timestamp = include_timestamp
        self.include_level = include_level

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as human-readable text."""
        parts = []

        if self.include_timestamp:
            timestamp = datetime.fromtimestamp(record.created, timezone.utc)
            parts.append(f"[{timestamp.strftime('%Y-%m-%d %H:%M:%S')}]")

        if self.include_level:
            level = record.levelname
            if self.use_colors and level in self.COLORS:
                level = f"{self.COLORS[level]}{level}{self.RESET}"
            parts.append(f"{level:>8}")

        parts.append(f"{record.name}:")
        parts.append(record.getMessage())

        output = " ".join(parts)

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


class IamLogger:
    """
    Wrapper around Python logging for identity lifecycle events.

    Carries persistent context (provider, tenant) into every record so
    structured output can be filtered per account or project.
    """

    def __init__(self, name: str, level: int | None = None):
        """
        Initialize the logger.

        Args:
            name: Logger name
            level: Optional log level; inherited from parents when None
        """
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)
        self._context: dict[str, Any] = {}

    def set_context(self, **kwargs: Any) -> None:
        """Set persistent context fields for all logs."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        """Clear context fields."""
        self._context.clear()

    def _log(
        self,
        level: int,
        message: str,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        extra = {**self._context, **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def identity_created(self, provider: str, identity_name: str, handle: str) -> None:
        """Log identity creation event."""
        self.info(
            f"Created identity {identity_name}",
            event_type="identity.created",
            provider=provider,
            identity_name=identity_name,
            handle=handle,
        )

    def identity_reused(self, provider: str, identity_name: str, handle: str) -> None:
        """Log that create found an existing identity and returned it."""
        self.info(
            f"Identity {identity_name} already exists, returning existing handle",
            event_type="identity.reused",
            provider=provider,
            identity_name=identity_name,
            handle=handle,
        )

    def identity_deleted(self, provider: str, identity_name: str) -> None:
        """Log identity deletion event."""
        self.info(
            f"Deleted identity {identity_name}",
            event_type="identity.deleted",
            provider=provider,
            identity_name=identity_name,
        )

    def operation_failed(
        self,
        provider: str,
        operation: str,
        error_kind: str,
        error: str,
    ) -> None:
        """Log a mapped provider failure."""
        self.error(
            f"{operation} failed: {error}",
            event_type="operation.failed",
            provider=provider,
            operation=operation,
            error_kind=error_kind,
        )


def configure_logging(
    level: str = "INFO",
    format: str = "human",
    output: str = "stderr",
    extra_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure logging for IAMKit.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (human, json)
        output: Output destination (stderr, stdout)
        extra_fields: Extra fields to include in structured logs
    """
    root_logger = logging.getLogger("iamkit")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    if output == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.StreamHandler(sys.stderr)

    if format == "json":
        formatter: logging.Formatter = StructuredFormatter(extra_fields=extra_fields)
    else:
        formatter = HumanReadableFormatter()

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def configure_logging_from_env() -> None:
    """Configure logging from IAMKIT_LOG_LEVEL and IAMKIT_LOG_FORMAT."""
    configure_logging(
        level=os.getenv("IAMKIT_LOG_LEVEL", "INFO"),
        format=os.getenv("IAMKIT_LOG_FORMAT", "human"),
    )


def get_logger(name: str) -> IamLogger:
    """
    Get an IAMKit logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        IamLogger instance
    """
    if not name.startswith("iamkit"):
        name = f"iamkit.{name}"
    return IamLogger(name)
