"""
Logging configuration for browser-tasks.

This module handles the centralized logging configuration including:
- Console output with colored level names
- Optional rotating file output
- Global debug flag mechanism
- Logger retrieval with component-specific levels
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional, Union

# Global debug flag
_DEBUG_MODE = False

# Component-specific log levels
_COMPONENT_LOG_LEVELS = {
    "client.sync_client": logging.INFO,
    "tasks.poller": logging.INFO,
}

# Default log format with detailed context
_DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s"

# Simplified format for console in normal mode
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_LOG_COLORS = {
    "DEBUG": "\033[94m",  # Blue
    "INFO": "\033[92m",  # Green
    "WARNING": "\033[93m",  # Yellow
    "ERROR": "\033[91m",  # Red
    "CRITICAL": "\033[91m\033[1m",  # Bold Red
    "RESET": "\033[0m",
}

_ROOT_LOGGER_NAME = "browser_tasks"


class ColorFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for console output."""

    def format(self, record):
        levelname = record.levelname
        if levelname in _LOG_COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                f"{_LOG_COLORS[levelname]}{levelname}{_LOG_COLORS['RESET']}"
            )
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name and apply component-specific levels.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(name)

    # Debug mode overrides component levels
    if not _DEBUG_MODE:
        for component, level in _COMPONENT_LOG_LEVELS.items():
            if component in name:
                logger.setLevel(level)
                break

    return logger


def set_debug_mode(enabled: bool) -> None:
    """
    Set the global debug mode flag.

    Args:
        enabled: True to enable debug mode, False to disable
    """
    global _DEBUG_MODE
    old_value = _DEBUG_MODE
    _DEBUG_MODE = enabled

    if old_value != _DEBUG_MODE:
        root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
        if enabled:
            root_logger.setLevel(logging.DEBUG)
            # Component loggers were pinned to their own levels
            for component in _COMPONENT_LOG_LEVELS:
                logging.getLogger(f"{_ROOT_LOGGER_NAME}.{component}").setLevel(
                    logging.NOTSET
                )
            root_logger.debug("Debug mode enabled")
        else:
            root_logger.debug("Debug mode disabled")
            root_logger.setLevel(logging.INFO)


def is_debug_mode() -> bool:
    """Check if debug mode is currently enabled."""
    return _DEBUG_MODE


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    config: Optional[dict[str, Any]] = None,
) -> None:
    """
    Configure console and optional file output for the browser_tasks loggers.

    Handlers are attached to the ``browser_tasks`` logger rather than the root
    logger so that embedding applications keep control of their own logging.

    Args:
        log_dir: Directory to store log files; no file output when omitted
        console_level: Logging level for console output
        file_level: Logging level for file output
        max_file_size_mb: Maximum size of each log file in MB before rotation
        backup_count: Number of backup log files to keep
        config: Additional options (``console_format``, ``file_format``)
    """
    if config is None:
        config = {}

    package_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG if is_debug_mode() else logging.INFO)
    package_logger.propagate = False

    # Clear any existing handlers to avoid duplicates if reconfigured
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    # Console goes to stderr so JSON output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_format = config.get("console_format", _CONSOLE_FORMAT)
    console_handler.setFormatter(ColorFormatter(console_format))
    package_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(exist_ok=True, parents=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / "browser_tasks.log",
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(file_level)
        file_format = config.get("file_format", _DEFAULT_FORMAT)
        file_handler.setFormatter(logging.Formatter(file_format))
        package_logger.addHandler(file_handler)

    package_logger.debug(
        f"Logging initialized (console: {logging.getLevelName(console_level)}, "
        f"files: {log_dir or 'disabled'})"
    )
