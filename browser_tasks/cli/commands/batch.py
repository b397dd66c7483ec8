"""Batch command implementation.

Implements `browser-tasks batch FILE`, which runs every task request in a
JSON file one after another.
"""

import json
from pathlib import Path

import typer

from browser_tasks.cli import session
from browser_tasks.cli.output import console, print_error, print_json
from browser_tasks.cli.state import CLIState
from browser_tasks.errors import BrowserTasksError
from browser_tasks.logging import get_logger
from browser_tasks.tasks.models import TaskRequest
from browser_tasks.tasks.service import run_batch

logger = get_logger(__name__)


def load_batch_file(path: Path) -> list[dict]:
    """Read a JSON array of task requests (a single object is also accepted)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("Batch file must contain a JSON object or an array of objects")
    return data


def batch(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with task requests"),
    continue_on_fail: bool = typer.Option(
        False,
        "--continue-on-fail",
        help="Record failed items and keep going instead of stopping",
    ),
) -> None:
    """Execute several tasks from a JSON file.

    Each entry accepts the same fields as `execute`, e.g.
    {"task": "...", "startUrl": "...", "timeout": 120, "schemaTemplate": "article"}.

    Examples:
        browser-tasks batch tasks.json --continue-on-fail --json
    """
    state: CLIState = ctx.obj

    try:
        items = load_batch_file(file)
    except (OSError, ValueError) as e:
        print_error(f"Could not read batch file: {e}", state)
        raise typer.Exit(1) from None

    def _execute(item: dict):
        return service.execute_task(TaskRequest.from_dict(item))

    try:
        with session.open_service(state) as service:
            results = run_batch(items, _execute, continue_on_fail=continue_on_fail)
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None

    failed = sum(1 for result in results if not result.ok)
    logger.info(f"Batch finished: {len(results)} results, {failed} failed")

    if state.json_mode:
        print_json([{"item": r.index, **_as_dict(r.data)} for r in results])
        return

    for result in results:
        if result.ok:
            data = result.data
            status = data.get("status") if isinstance(data, dict) else None
            console.print(
                f"[{result.index}] [cyan]{_as_dict(data).get('id', '?')}[/cyan] {status}"
            )
        else:
            console.print(f"[{result.index}] [red]failed:[/red] {result.data['error']}")
    console.print(f"{len(results) - failed} succeeded, {failed} failed")


def _as_dict(data) -> dict:
    return data if isinstance(data, dict) else {"result": data}
