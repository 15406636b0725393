"""
Structured Logging Configuration

Provides JSON-formatted logs carrying a per-run correlation id, plus a plain
text setup for interactive use.
"""

import logging
import json
import uuid
import os
from datetime import datetime, timezone
from typing import Optional
from contextvars import ContextVar


# Context variable for the run correlation ID
run_id_var: ContextVar[Optional[str]] = ContextVar('run_id', default=None)

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs one JSON object per record with the run id and any extra fields
    passed through ``log_with_context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        run_id = run_id_var.get()
        if run_id:
            log_data["run_id"] = run_id

        log_data["process_id"] = os.getpid()

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        if hasattr(record, 'duration_ms'):
            log_data["duration_ms"] = record.duration_ms

        return json.dumps(log_data, default=str)


def _build_handlers(formatter: logging.Formatter, log_file: Optional[str],
                    enable_console: bool) -> list:
    handlers = []

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def _install_handlers(log_level: str, handlers: list) -> logging.Logger:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    # urllib3 is chatty at DEBUG about every pooled connection
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return root_logger


def setup_structured_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True
) -> None:
    """
    Configure structured (JSON) logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        enable_console: Whether to enable console logging
    """
    handlers = _build_handlers(StructuredFormatter(), log_file, enable_console)
    root_logger = _install_handlers(log_level, handlers)

    root_logger.info("Structured logging configured", extra={
        "extra_fields": {
            "log_level": log_level,
            "log_file": log_file,
            "handlers": len(handlers)
        }
    })


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_LOG_FORMAT
) -> None:
    """Configure plain-text logging to the console and, optionally, a file."""
    handlers = _build_handlers(logging.Formatter(log_format), log_file, True)
    root_logger = _install_handlers(log_level, handlers)
    root_logger.info(f"Logging configured: level={log_level}, file={log_file}")


def get_run_id() -> str:
    """
    Get current run ID or create a new one.

    Returns:
        str: Run ID (UUID4)
    """
    run_id = run_id_var.get()
    if not run_id:
        run_id = str(uuid.uuid4())
        run_id_var.set(run_id)
    return run_id


def set_run_id(run_id: str) -> None:
    """Set the run ID for the current context."""
    run_id_var.set(run_id)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields
) -> None:
    """
    Log with structured context.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        **extra_fields: Additional fields to include in log

    Example:
        >>> log_with_context(
        ...     logger,
        ...     "warning",
        ...     "gene_fetch_failed",
        ...     gene_id="839580",
        ...     error="Read timed out"
        ... )
    """
    log_func = getattr(logger, level.lower())
    log_func(message, extra={"extra_fields": extra_fields})
