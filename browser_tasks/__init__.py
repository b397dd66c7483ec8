"""
browser-tasks - Run and manage Browser Use cloud agent tasks.
"""

from dotenv import load_dotenv

from browser_tasks.logging import (
    configure_logging,
    get_logger,
    is_debug_mode,
    set_debug_mode,
)
from browser_tasks.version import __version__

# Load environment variables (BROWSER_USE_API_KEY, ...) from .env file
load_dotenv()

__all__ = [
    "__version__",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "set_debug_mode",
]
