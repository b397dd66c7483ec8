"""
Version management for browser-tasks.

The installed distribution metadata is the single source of truth; the
fallback covers running from a source checkout that was never installed.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("browser-tasks")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"
