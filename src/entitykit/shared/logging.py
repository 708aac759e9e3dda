"""
Structured logging system for EntityKit.

This module provides helpers that record logs enriched with structured
context (error code, operation, context dict) whenever an operation
succeeds, degrades, or fails.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from entitykit.shared.constants.logging import Logging
from entitykit.shared.errors import EntityKitError, ErrorContext

if TYPE_CHECKING:
    from entitykit.config.models.app_settings import LoggingSettings


class StructuredFormatter(logging.Formatter):
    """
    Formatter that renders log records as JSON objects.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Logging record

        Returns:
            JSON formatted log line
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "error_code"):
            log_entry["error_code"] = record.error_code

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if hasattr(record, "operation"):
            log_entry["operation"] = record.operation

        if hasattr(record, "duration_ms"):
            log_entry["duration_ms"] = record.duration_ms

        if hasattr(record, "result_info"):
            log_entry["result_info"] = record.result_info

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Create a Rich Console with the EntityKit theme.

    Returns:
        Configured Rich Console instance
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = Logging.ROOT_LOGGER,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure a logger for structured output.

    Args:
        name: Logger name (default: "entitykit")
        level: Log level (default: "INFO")
        log_file: Optional log file path, always written as JSON
        use_rich_console: Use Rich console output instead of JSON lines

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers on reconfiguration
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format=Logging.RICH_TIME_FORMAT,
        )
        handler.setLevel(log_level)
        logger.addHandler(handler)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Apply a LoggingSettings model to the package logger.

    Args:
        settings: Logging configuration

    Returns:
        The configured package logger
    """
    return setup_structured_logger(
        level=settings.level,
        log_file=settings.file,
        use_rich_console=settings.use_rich,
    )


def _merge_context(
    base: dict[str, Any],
    extra: (dict[str, Any] | ErrorContext) | None,
) -> dict[str, Any]:
    if extra is None:
        return base
    if isinstance(extra, ErrorContext):
        base.update(extra.safe_dict())
    else:
        base.update(extra)
    return base


def log_operation_error(
    logger: logging.Logger,
    error: EntityKitError,
    operation: str | None = None,
    additional_context: (dict[str, Any] | ErrorContext) | None = None,
) -> None:
    """
    Record an EntityKitError as a structured ERROR log.

    Args:
        logger: Logger instance
        error: EntityKitError to record
        operation: Operation name (defaults to the error's context operation)
        additional_context: Extra context merged into the record
    """
    context_dict = _merge_context(error.context.safe_dict(), additional_context)

    logger.error(
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None,
    )


def log_operation_warning(
    logger: logging.Logger,
    error: EntityKitError,
    operation: str | None = None,
    additional_context: (dict[str, Any] | ErrorContext) | None = None,
) -> None:
    """
    Record a degraded operation as a structured WARNING log.

    Used for declared failures and for storage faults that were absorbed
    into a miss or no-op.

    Args:
        logger: Logger instance
        error: EntityKitError describing the failure
        operation: Operation name (defaults to the error's context operation)
        additional_context: Extra context merged into the record
    """
    context_dict = _merge_context(error.context.safe_dict(), additional_context)

    logger.warning(
        "WARNING: %s",
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: (dict[str, Any] | ErrorContext) | None = None,
) -> None:
    """
    Record a successful operation at DEBUG level.

    Args:
        logger: Logger instance
        operation: Operation name
        duration_ms: Elapsed time in milliseconds
        result_info: Result summary (optional)
        context: Context information (optional)
    """
    context_dict = _merge_context({}, context)

    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": context_dict,
        },
    )
