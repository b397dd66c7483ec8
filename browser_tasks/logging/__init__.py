"""
Logging system for browser-tasks.

Centralized logging configuration with colored console output, optional
rotating file output and a global debug switch.
"""

from browser_tasks.logging.config import (
    configure_logging,
    get_logger,
    is_debug_mode,
    set_debug_mode,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "set_debug_mode",
    "is_debug_mode",
]
