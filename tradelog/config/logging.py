"""
Tradelog Logging Configuration

Console and JSON formatters, a load-id context variable that correlates all
records of one feed load, and a timing decorator for pipeline stages.
"""

import asyncio
import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar

# Context variable for load correlation
load_id_var: ContextVar[Optional[str]] = ContextVar("load_id", default=None)


# =============================================================================
# Log Level Strategy
# =============================================================================
#
# DEBUG   - Empty trailing rows skipped, stage timings
# INFO    - Loads started/committed, cache restored/saved
# WARNING - Malformed rows skipped, stale loads discarded, images unavailable
# ERROR   - Failed loads (network, envelope, configuration), cache writes
# =============================================================================


class StructuredFormatter(logging.Formatter):
    """JSON log formatter for log aggregation."""

    def __init__(self, service_name: str = "tradelog", environment: str = "development"):
        super().__init__()
        self.service_name = service_name
        self.environment = environment
        self.hostname = os.uname().nodename if hasattr(os, "uname") else None

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "environment": self.environment,
            "hostname": self.hostname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
            "load_id": get_load_id(),
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                log_data[key[4:]] = value

        log_data = {k: v for k, v in log_data.items() if v is not None}

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable coloured formatter for the terminal."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        load_id = get_load_id()
        load_str = f"[{load_id[:8]}] " if load_id else ""

        formatted = (
            f"{timestamp} {color}{record.levelname:8}{self.RESET} "
            f"{load_str}{record.name} - {record.getMessage()}"
        )

        extras = [
            f"{key[4:]}={value}"
            for key, value in record.__dict__.items()
            if key.startswith("ctx_")
        ]
        if extras:
            formatted += f" | {', '.join(extras)}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
    service_name: str = "tradelog",
) -> None:
    """
    Configure logging for the journal.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging
        log_file: Optional file path; always written as JSON
        service_name: Service name for structured logs
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = StructuredFormatter(service_name)
    else:
        formatter = ConsoleFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(service_name))
        root_logger.addHandler(file_handler)

    # Quieten third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# =============================================================================
# Load Correlation
# =============================================================================


def set_load_context(load_id: Optional[str] = None) -> str:
    """Set the current load id, generating one if not given."""
    value = load_id or uuid.uuid4().hex
    load_id_var.set(value)
    return value


def clear_load_context() -> None:
    load_id_var.set(None)


def get_load_id() -> Optional[str]:
    return load_id_var.get()


# =============================================================================
# Timing Decorator
# =============================================================================

T = TypeVar("T")


def log_duration(threshold_ms: float = 1000.0) -> Callable:
    """
    Log how long the decorated function took.

    Runs slower than ``threshold_ms`` log at WARNING, others at DEBUG.
    Works on both plain and coroutine functions.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        func_logger = logging.getLogger(func.__module__)

        def _report(start_time: float) -> None:
            duration_ms = (time.perf_counter() - start_time) * 1000
            extra: Dict[str, Any] = {
                "ctx_function": func.__name__,
                "ctx_duration_ms": round(duration_ms, 2),
            }
            if duration_ms > threshold_ms:
                func_logger.warning(
                    f"Slow operation: {func.__name__} took {duration_ms:.2f}ms",
                    extra=extra,
                )
            else:
                func_logger.debug(
                    f"Operation completed: {func.__name__} in {duration_ms:.2f}ms",
                    extra=extra,
                )

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                _report(start_time)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                _report(start_time)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
