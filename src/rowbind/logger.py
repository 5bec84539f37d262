"""Logging configuration for rowbind.

Every rowbind module logs through a child of the ``rowbind`` logger. Only
that package logger carries a handler; children inherit its level and
propagate to it, and it does not propagate to the root logger.

Environment Variables:
    ROWBIND_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                       Default: INFO
    ROWBIND_LOG_FORMAT: Output format ("standard" or "json").
                        Default: standard
"""

import json
import logging
import os
import sys
from typing import Any

LOG_FORMAT_STANDARD = "%(asctime)s.%(msecs)03d - %(levelname)s - %(message)s"

LOG_FORMAT_DEBUG = (
    "%(asctime)s.%(msecs)03d - %(levelname)s - "
    "%(filename)s:%(lineno)d - %(name)s:%(funcName)s - %(message)s"
)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "rowbind"


def _resolve_log_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("ROWBIND_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _format_type() -> str:
    return os.getenv("ROWBIND_LOG_FORMAT", "standard").lower()


class JSONFormatter(logging.Formatter):
    """Format log records as newline-delimited JSON.

    Each line holds timestamp, level, message, logger name, module, function
    and line number, plus the formatted traceback when one is attached.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def _build_formatter(format_type: str, level: int) -> logging.Formatter:
    if format_type == "json":
        return JSONFormatter(datefmt=DATE_FORMAT)
    # file location only at DEBUG
    if level == logging.DEBUG:
        return logging.Formatter(LOG_FORMAT_DEBUG, datefmt=DATE_FORMAT)
    return logging.Formatter(LOG_FORMAT_STANDARD, datefmt=DATE_FORMAT)


def _package_logger() -> logging.Logger:
    """Return the ``rowbind`` logger, attaching its stderr handler on first use."""
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if package_logger.handlers:
        return package_logger

    level = _resolve_log_level(None)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter(_format_type(), level))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a rowbind module logger.

    Args:
        name: Typically __name__ of the calling module.

    Returns:
        Logger sharing the package handler and level.
    """
    _package_logger()
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Change the level of every rowbind logger at runtime.

    Args:
        level: New log level as int constant or string name.
    """
    package_logger = _package_logger()
    resolved_level = _resolve_log_level(level)
    package_logger.setLevel(resolved_level)
    for handler in package_logger.handlers:
        handler.setFormatter(_build_formatter(_format_type(), resolved_level))
