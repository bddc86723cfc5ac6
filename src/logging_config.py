"""Logging configuration for the Shopify order accessor.

Two output formats are supported:
- Console: Rich-formatted colored output for development
- JSON: one JSON object per line for log aggregation
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from src.config import LogFormat, get_settings

BASE_LOGGER_NAME = "shopify_orders"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Formats each record as a single JSON line.

    Fields passed through ``extra=`` (order ids, operation kinds, retry
    counts) are merged into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_logging(
    log_level: str | None = None,
    log_format: LogFormat | None = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            If None, uses LOG_LEVEL from environment/config.
        log_format: Override log format (CONSOLE or JSON).
            If None, uses LOG_FORMAT from environment/config.

    Returns:
        The configured ``shopify_orders`` logger.

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_format=LogFormat.JSON)
        >>> logger.info("Order fetched", extra={"order_id": "gid://shopify/Order/1"})
    """
    if log_level is None or log_format is None:
        settings = get_settings()
        log_level = log_level or settings.log_level
        log_format = log_format or settings.log_format

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(BASE_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    handler: logging.Handler
    if log_format == LogFormat.JSON:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_level=True,
            show_path=True,
            rich_tracebacks=True,
            tracebacks_show_locals=level <= logging.DEBUG,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    handler.setLevel(level)
    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a child of the package logger.

    Args:
        name: Optional name for the logger. Typically use __name__.

    Returns:
        Logger instance.
    """
    if name:
        return logging.getLogger(f"{BASE_LOGGER_NAME}.{name}")
    return logging.getLogger(BASE_LOGGER_NAME)
