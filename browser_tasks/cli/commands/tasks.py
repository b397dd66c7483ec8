"""Task lifecycle commands: get, list, stop, update and check."""

from typing import Optional

import typer

from browser_tasks.cli import session
from browser_tasks.cli.output import (
    print_error,
    print_json,
    print_success,
    print_task,
    print_task_table,
)
from browser_tasks.cli.state import CLIState
from browser_tasks.errors import BrowserTasksError
from browser_tasks.tasks.operations import DEFAULT_LIST_LIMIT


def get(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID"),
) -> None:
    """Show the details of a task.

    Examples:
        browser-tasks get 3f1c...
    """
    state: CLIState = ctx.obj
    try:
        with session.open_service(state) as service:
            task = service.get_task(task_id)
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None
    print_task(task, state)


def list_cmd(
    ctx: typer.Context,
    status: str = typer.Option(
        "all", "--status", "-s", help="Filter: all, finished, running, stopped"
    ),
    limit: int = typer.Option(
        DEFAULT_LIST_LIMIT, "--limit", "-n", help="Maximum number of tasks"
    ),
    return_all: bool = typer.Option(
        False, "--all", "-a", help="Return every task, ignoring --limit"
    ),
) -> None:
    """List tasks in your account.

    Examples:
        browser-tasks list --status running

        browser-tasks list --all --json
    """
    state: CLIState = ctx.obj
    try:
        with session.open_service(state) as service:
            tasks = service.list_tasks(
                status_filter=status, limit=limit, return_all=return_all
            )
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None

    if isinstance(tasks, list):
        print_task_table(tasks, state)
    else:
        print_json(tasks)


def stop(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to stop"),
) -> None:
    """Stop a running task."""
    state: CLIState = ctx.obj
    try:
        with session.open_service(state) as service:
            result = service.stop_task(task_id)
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None

    if state.json_mode:
        print_json(result)
    else:
        print_success(f"{result['message']}: {task_id}", state)


def update(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to update"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="New task description"
    ),
    status: Optional[str] = typer.Option(
        None, "--status", "-s", help="New status: running or stopped"
    ),
) -> None:
    """Update a task's description or status."""
    state: CLIState = ctx.obj
    try:
        with session.open_service(state) as service:
            task = service.update_task(task_id, description=description, status=status)
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None
    print_task(task, state)


def check(ctx: typer.Context) -> None:
    """Verify that the configured API key is accepted."""
    state: CLIState = ctx.obj
    try:
        with session.open_service(state) as service:
            ok = service.verify_credentials()
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None

    if not ok:
        print_error(
            "The Browser Use API did not accept the request. "
            "Check BROWSER_USE_API_KEY and BROWSER_USE_BASE_URL.",
            state,
        )
        raise typer.Exit(1)
    print_success("Credentials verified", state)
