"""CLI app entry point.

Provides the main Typer app with global flags for output format,
verbosity and API URL. State is stored in the Typer context for commands.
"""

import logging
from typing import Optional

import typer

from browser_tasks.cli.commands import batch, check, execute, get, list_cmd, stop, update
from browser_tasks.cli.state import CLIState
from browser_tasks.config.settings import get_logging_settings
from browser_tasks.logging import configure_logging, set_debug_mode

app = typer.Typer(
    name="browser-tasks",
    help="Run and manage Browser Use cloud agent tasks.",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for scripting",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="API base URL (overrides BROWSER_USE_BASE_URL)",
    ),
) -> None:
    """Browser Use task CLI."""
    logging_settings = get_logging_settings()
    set_debug_mode(verbose)
    configure_logging(
        log_dir=logging_settings.dir,
        console_level=(
            logging.DEBUG
            if verbose
            else getattr(logging, logging_settings.level.upper(), logging.WARNING)
        ),
    )

    ctx.obj = CLIState(
        json_mode=json_output,
        verbose=verbose,
        api_url=url.rstrip("/") if url else None,
    )


app.command()(execute)
app.command()(get)
app.command("list")(list_cmd)
app.command()(stop)
app.command()(update)
app.command()(check)
app.command()(batch)
