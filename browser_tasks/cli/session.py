"""Service construction for CLI commands."""

from browser_tasks.cli.state import CLIState
from browser_tasks.tasks.service import BrowserUseTaskService


def open_service(state: CLIState) -> BrowserUseTaskService:
    """Build a task service honoring the --url override.

    The returned service must be used as a context manager.
    """
    return BrowserUseTaskService(base_url=state.api_url)
