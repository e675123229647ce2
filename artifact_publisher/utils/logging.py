"""
Logging utilities for the artifact publisher.

Provides per-module loggers, a JSON formatter for CI log collectors,
colorized console output for interactive runs, correlation IDs that tie
together all log lines of one publish run, and an entry/exit decorator.

Features:
    - Structured JSON logging when LOG_FORMAT=json
    - Correlation ID tracking across a publish run
    - Entry/exit decorator with timing
    - Colorized console output via coloredlogs

Example usage:
    >>> from artifact_publisher.utils.logging import get_logger, log_function_call
    >>>
    >>> logger = get_logger(__name__)
    >>> set_correlation_id("release-1.4.0")
    >>>
    >>> @log_function_call
    >>> def publish(path: str) -> bool:
    >>>     logger.info("Publishing", extra={"path": path})
    >>>     return True
"""

import logging
import functools
import json
import os
import uuid
from typing import Any, Callable, TypeVar, cast, Optional, Dict
from datetime import datetime, timezone
from contextvars import ContextVar

import coloredlogs

F = TypeVar("F", bound=Callable[..., Any])

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_OUTPUT_FORMAT = "text"

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_RECORD_ATTRS = frozenset(
    [
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
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "getMessage",
    ]
)


# ============================================================================
# Correlation ID Management
# ============================================================================

def get_correlation_id() -> str:
    """
    Get current correlation ID or generate new one.

    Returns:
        Current correlation ID (generates UUID if not set)
    """
    corr_id = _correlation_id.get()
    if corr_id is None:
        corr_id = str(uuid.uuid4())
        _correlation_id.set(corr_id)
    return corr_id


def set_correlation_id(corr_id: str) -> None:
    """
    Set correlation ID for current context.

    Args:
        corr_id: Correlation ID to set (e.g. the release version)
    """
    _correlation_id.set(corr_id)


def clear_correlation_id() -> None:
    """Clear correlation ID for current context."""
    _correlation_id.set(None)


# ============================================================================
# JSON Formatter
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Example output:
        {
            "timestamp": "2026-01-04T10:30:15.123456+00:00",
            "level": "INFO",
            "logger": "artifact_publisher.uploader.client",
            "message": "Uploaded bundle.js",
            "correlation_id": "release-1.4.0",
            "extra": {"destination_key": "/dist/bundle.js"}
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": get_correlation_id(),
        }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        # CI runners expose these; they identify which job emitted the line
        log_data["environment"] = {
            "hostname": os.getenv("HOSTNAME", "unknown"),
            "ci_job": os.getenv("CI_JOB_ID", os.getenv("GITHUB_RUN_ID", "")),
        }

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    enable_colors: bool = True,
    output_format: str = DEFAULT_OUTPUT_FORMAT,
) -> None:
    """
    Configure global logging settings for the application.

    Uses JSON output when ``output_format`` is "json", colorized text otherwise.
    The package passes the LOG_FORMAT setting read through ConfigSource.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        enable_colors: Whether to enable colorized console output
        output_format: "text" or "json"

    Example:
        >>> setup_logging(level="DEBUG")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if output_format.lower() == "json":
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(console_handler)
    elif enable_colors:
        coloredlogs.install(
            level=log_level,
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            logger=root_logger,
        )
    else:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        )
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_function_call(func: F) -> F:
    """
    Decorator that logs function entry and exit with parameters and return values.

    Entry and exit are logged at DEBUG, exceptions at ERROR with traceback.
    The exception is always re-raised. Do not apply this to functions that
    receive secrets: arguments are logged with repr().

    Args:
        func: Function to be decorated

    Returns:
        Wrapped function with logging

    Example:
        >>> @log_function_call
        >>> def prepare(artifacts, destination):
        >>>     ...
        >>>
        >>> # 2026-01-04 10:30:15 - module - DEBUG - ENTER prepare(...)
        >>> # 2026-01-04 10:30:15 - module - DEBUG - EXIT prepare -> ... (0.00s)
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        correlation_id = get_correlation_id()

        arg_names = func.__code__.co_varnames[: func.__code__.co_argcount]
        args_repr = [
            f"{name}={value!r}"
            for name, value in zip(arg_names, args)
            if name != "self"
        ]
        kwargs_repr = [f"{key}={value!r}" for key, value in kwargs.items()]
        all_args = ", ".join(args_repr + kwargs_repr)

        logger.debug(
            f"ENTER {func.__name__}({all_args})",
            extra={
                "function": func.__name__,
                "correlation_id": correlation_id,
                "event": "function_entry",
            },
        )

        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)
        except Exception as error:
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"ERROR {func.__name__} raised {type(error).__name__}: {error}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": execution_time,
                    "correlation_id": correlation_id,
                    "event": "function_error",
                    "status": "error",
                    "error_type": type(error).__name__,
                },
                exc_info=True,
            )
            raise

        execution_time = (datetime.now() - start_time).total_seconds()
        logger.debug(
            f"EXIT {func.__name__} -> {result!r} ({execution_time:.2f}s)",
            extra={
                "function": func.__name__,
                "duration_seconds": execution_time,
                "correlation_id": correlation_id,
                "event": "function_exit",
                "status": "success",
            },
        )

        return result

    return cast(F, wrapper)
