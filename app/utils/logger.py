"""
Logging configuration module for the Blockgate service.

- Colored console output in development (ENV=dev)
- One-line JSON records everywhere else, for the log shipper
- Deduplication of root stream handlers (uvicorn reload / repeated create_app)
- Performance timing decorator for development/QA environments
"""

import logging
import sys
import os
import json
import time
from typing import Optional, Dict, Any, Callable
from functools import wraps
from datetime import datetime, timezone


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for log levels and logger names in development environments."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[1;31m", # Bold Red
    }
    GREY = "\033[90m"
    RESET = "\033[0m"

    def formatTime(self, record, datefmt=None):
        """Override to include milliseconds in the timestamp."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s},{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        original_name = record.name

        log_color = self.COLORS.get(record.levelname, "")
        if log_color:
            record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        record.name = f"{self.GREY}{record.name}{self.RESET}"

        formatted = super().format(record)

        # Restore original values for next handler
        record.levelname = original_levelname
        record.name = original_name

        return formatted


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production environments."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add any extra fields
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


def _get_log_level() -> str:
    """
    Get log level from environment variable.

    Returns:
        str: Logging level name (defaults to INFO if not set or invalid)
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


def _get_environment() -> str:
    """
    Get current environment from ENV variable.

    Returns:
        str: Environment name (dev, qa, prod, etc.)
    """
    return os.getenv("ENV", "prod").lower()


def setup_logging() -> None:
    """
    Install a single console handler on the root logger.

    Safe to call more than once: existing StreamHandlers on the root logger are
    dropped before ours is added, FileHandlers are kept untouched.
    """
    env = _get_environment()

    if env == "dev":
        formatter: logging.Formatter = ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = JSONFormatter()

    root_logger = logging.getLogger()

    other_handlers = [
        h for h in root_logger.handlers
        if not isinstance(h, logging.StreamHandler) or isinstance(h, logging.FileHandler)
    ]
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    for h in other_handlers:
        root_logger.addHandler(h)

    root_logger.setLevel(_get_log_level())


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the specified name.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Application started")
    """
    return logging.getLogger(name)


def log_execution_time(func: Optional[Callable] = None, *, level: str = "DEBUG") -> Callable:
    """
    Decorator to log function execution time.

    Only active in dev and qa environments; in production it calls straight through.

    Example:
        >>> @log_execution_time(level="INFO")
        ... def load_from_url(url):
        ...     pass
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if _get_environment() not in ("dev", "qa"):
                return f(*args, **kwargs)

            logger = get_logger(f.__module__)
            start_time = time.perf_counter()
            try:
                return f(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start_time
                log_method = getattr(logger, level.lower(), logger.debug)
                log_method(f"Function '{f.__name__}' executed in {elapsed:.4f}s")

        return wrapper

    # Allow usage with or without parentheses
    if func is None:
        return decorator
    return decorator(func)
