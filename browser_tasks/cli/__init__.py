"""
Command Line Interface for browser-tasks.
"""

from browser_tasks.cli.app import app

__all__ = ["app"]
