"""
Centralized logging configuration for the document store.

Provides contextual logging with database and collection tagging.
Supports a global debug flag (DEBUG_MODE=true) for verbose output.
"""

import json
import logging
import os
import sys
from typing import Optional


# Global debug mode flag - can be set via environment
_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def is_debug_mode() -> bool:
    """Check if debug mode is enabled globally."""
    return _GLOBAL_DEBUG_MODE


class StoreLogger:
    """
    Logger for document store operations.

    Adds contextual information like database and collection to all log messages.
    """

    def __init__(
        self,
        name: str,
        database: Optional[str] = None,
        collection: Optional[str] = None,
        debug_mode: Optional[bool] = None
    ):
        """
        Initialize store logger.

        Args:
            name: Logger name (usually __name__)
            database: Optional database name
            collection: Optional collection name
            debug_mode: If True, enables DEBUG level for this logger.
                       If None, uses global debug mode setting.
        """
        self.logger = logging.getLogger(name)
        self.database = database
        self.collection = collection

        self._debug_mode = debug_mode if debug_mode is not None else is_debug_mode()
        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

    def for_collection(self, collection: str) -> "StoreLogger":
        """Return a logger tagged with the given collection."""
        return StoreLogger(self.logger.name, self.database, collection, self._debug_mode)

    def _format_message(self, message: str) -> str:
        """Add contextual prefix to message."""
        prefix_parts = []
        if self.database:
            prefix_parts.append(f"[db:{self.database}]")
        if self.collection:
            prefix_parts.append(f"[{self.collection}]")

        if prefix_parts:
            return f"{' '.join(prefix_parts)} {message}"
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message."""
        self.logger.error(self._format_message(message), **kwargs)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, parseable by log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    database: Optional[str] = None,
    collection: Optional[str] = None,
    debug_mode: Optional[bool] = None
) -> StoreLogger:
    """
    Get a store logger instance.

    Args:
        name: Logger name (usually __name__)
        database: Optional database name
        collection: Optional collection name
        debug_mode: If True, enables DEBUG level. If None, uses global setting.

    Returns:
        StoreLogger instance
    """
    return StoreLogger(name, database, collection, debug_mode)
