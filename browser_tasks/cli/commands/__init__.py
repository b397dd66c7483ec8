"""CLI command implementations."""

from browser_tasks.cli.commands.batch import batch
from browser_tasks.cli.commands.execute import execute
from browser_tasks.cli.commands.tasks import check, get, list_cmd, stop, update

__all__ = ["batch", "check", "execute", "get", "list_cmd", "stop", "update"]
