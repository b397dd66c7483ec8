"""CLI output helpers.

Formats results and errors for human or JSON consumption based on
CLIState.json_mode. Human mode uses Rich; JSON mode prints plain JSON to
stdout for scripting.
"""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from browser_tasks.cli.state import CLIState

console = Console()
error_console = Console(stderr=True)

_STATUS_STYLES = {
    "finished": "green",
    "running": "yellow",
    "stopped": "red",
}


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_success(message: str, state: CLIState, data: Optional[Any] = None) -> None:
    """Print success message (human) or JSON response."""
    if state.json_mode:
        output: dict[str, Any] = {"status": "success", "message": message}
        if data is not None:
            output["data"] = data
        print_json(output)
    else:
        console.print(f"[green]{message}[/green]")


def print_error(message: str, state: CLIState, error: Optional[Exception] = None) -> None:
    """Print an error message with optional context from the exception.

    In human mode, prints to stderr with red formatting. In JSON mode,
    prints to stdout for parsability.
    """
    kind = getattr(error, "kind", None)
    status_code = getattr(error, "status_code", None)
    suggestion = getattr(error, "suggestion", None)
    task_id = getattr(error, "task_id", None)

    if state.json_mode:
        output: dict[str, Any] = {"status": "error", "message": message}
        if kind:
            output["kind"] = kind
        if status_code is not None:
            output["status_code"] = status_code
        if task_id:
            output["task_id"] = task_id
        if suggestion:
            output["suggestion"] = suggestion
        print_json(output)
        return

    error_console.print(f"[red bold]Error:[/red bold] {message}")
    if state.verbose and status_code is not None:
        error_console.print(f"  [dim]HTTP {status_code} ({kind})[/dim]")
    if suggestion:
        error_console.print(f"\n[cyan]Suggestion:[/cyan] {suggestion}")


def _status_text(status: Any) -> str:
    style = _STATUS_STYLES.get(str(status))
    return f"[{style}]{status}[/{style}]" if style else str(status)


def print_task(task: dict[str, Any], state: CLIState) -> None:
    """Print a single task or result envelope."""
    if state.json_mode:
        print_json(task)
        return

    console.print(f"Task: [cyan]{task.get('id', '?')}[/cyan]")
    console.print(f"  Status: {_status_text(task.get('status'))}")
    if "isSuccess" in task:
        console.print(f"  Success: {task.get('isSuccess')}")
    if task.get("agentMessage"):
        console.print(f"  {task['agentMessage']}")
    if task.get("cloudUrl"):
        console.print(f"  Watch: {task['cloudUrl']}")
    if task.get("warning"):
        console.print(f"  [yellow]Warning: {task['warning']}[/yellow]")
    if task.get("output"):
        console.print("  Output:")
        console.print(f"    {task['output']}", soft_wrap=True)
    if task.get("error"):
        console.print(f"  [red]Error: {task['error']}[/red]")


def print_task_table(tasks: list[dict[str, Any]], state: CLIState) -> None:
    """Print a list of tasks as a table."""
    if state.json_mode:
        print_json(tasks)
        return

    if not tasks:
        console.print("No tasks found")
        return

    table = Table(title=f"Tasks ({len(tasks)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Success")
    table.add_column("Task", overflow="ellipsis", max_width=60)
    for task in tasks:
        table.add_row(
            str(task.get("id", "")),
            _status_text(task.get("status")),
            str(task.get("isSuccess", "")),
            str(task.get("task", "")),
        )
    console.print(table)
