"""Execute command implementation.

Implements `browser-tasks execute`, which submits a task and waits for it
to finish, stop or time out.
"""

from pathlib import Path
from typing import Optional

import typer

from browser_tasks.cli import session
from browser_tasks.cli.output import print_error, print_task
from browser_tasks.cli.state import CLIState
from browser_tasks.errors import BrowserTasksError, InvalidArgumentError
from browser_tasks.tasks.models import (
    DEFAULT_TIMEOUT_SECONDS,
    AdvancedOptions,
    TaskRequest,
    parse_json_option,
)
from browser_tasks.tasks.templates import TEMPLATE_NAMES, SchemaTemplate


def parse_vision(value: Optional[str]):
    """Map the --vision flag to the API value (``"auto"``, True or False)."""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized == "auto":
        return "auto"
    if normalized in ("true", "enabled", "on", "yes"):
        return True
    if normalized in ("false", "disabled", "off", "no"):
        return False
    raise InvalidArgumentError(
        f"Unknown vision mode '{value}'. Use auto, enabled or disabled.",
        error_code="VALIDATION-InvalidVision",
    )


def resolve_structured_output(template: Optional[str], schema: Optional[str]):
    """Pick the schema spec from the --template and --schema flags.

    ``--schema @path`` reads the schema from a file.
    """
    if template and template != SchemaTemplate.CUSTOM.value:
        return template
    if schema:
        if schema.startswith("@"):
            return Path(schema[1:]).read_text(encoding="utf-8")
        return schema
    if template == SchemaTemplate.CUSTOM.value:
        return SchemaTemplate.CUSTOM
    return None


def execute(
    ctx: typer.Context,
    task: str = typer.Argument(..., help="What the AI agent should do"),
    start_url: Optional[str] = typer.Option(
        None, "--start-url", help="URL the browser opens first"
    ),
    timeout: int = typer.Option(
        DEFAULT_TIMEOUT_SECONDS,
        "--timeout",
        "-t",
        help="Seconds to wait for completion (10-3600)",
    ),
    template: Optional[str] = typer.Option(
        None,
        "--template",
        help=f"Structured output template: {', '.join(TEMPLATE_NAMES)} or custom",
    ),
    schema: Optional[str] = typer.Option(
        None,
        "--schema",
        help="Custom JSON schema or example object (prefix with @ to read a file)",
    ),
    llm: Optional[str] = typer.Option(None, "--llm", help="AI model for the agent"),
    max_steps: Optional[int] = typer.Option(
        None, "--max-steps", help="Maximum agent steps (1-200)"
    ),
    session_id: Optional[str] = typer.Option(
        None, "--session-id", help="Run inside an existing browser session"
    ),
    allowed_domains: Optional[str] = typer.Option(
        None, "--allowed-domains", help='JSON array, e.g. ["example.com"]'
    ),
    secrets: Optional[str] = typer.Option(
        None, "--secrets", help="JSON object of secrets for the agent"
    ),
    op_vault_id: Optional[str] = typer.Option(
        None, "--op-vault-id", help="1Password vault id"
    ),
    highlight_elements: bool = typer.Option(
        False, "--highlight-elements", help="Highlight elements during execution"
    ),
    flash_mode: bool = typer.Option(False, "--flash-mode", help="Faster execution"),
    thinking: bool = typer.Option(False, "--thinking", help="Show agent reasoning"),
    vision: Optional[str] = typer.Option(
        None, "--vision", help="Vision mode: auto, enabled or disabled"
    ),
    judge: bool = typer.Option(False, "--judge", help="Judge the task result"),
    judge_llm: Optional[str] = typer.Option(None, "--judge-llm", help="Judge model"),
    judge_ground_truth: Optional[str] = typer.Option(
        None, "--judge-ground-truth", help="Expected result for the judge"
    ),
    system_prompt_extension: Optional[str] = typer.Option(
        None, "--system-prompt-extension", help="Extra agent instructions"
    ),
    metadata: Optional[str] = typer.Option(
        None, "--metadata", help="JSON object of string metadata"
    ),
) -> None:
    """Run a task with an AI browser agent and wait for the result.

    Examples:
        browser-tasks execute "Find the top story on news.ycombinator.com"

        browser-tasks execute "Extract the product" --start-url https://shop.example --template product

        browser-tasks execute "List the team" --schema '[{"name": "string", "role": "string"}]'
    """
    state: CLIState = ctx.obj

    try:
        allowed = parse_json_option(allowed_domains)
        parsed_secrets = parse_json_option(secrets)
        parsed_metadata = parse_json_option(metadata)
        request = TaskRequest(
            description=task,
            start_url=start_url,
            timeout_seconds=timeout,
            structured_output=resolve_structured_output(template, schema),
            advanced=AdvancedOptions(
                llm=llm,
                max_steps=max_steps,
                session_id=session_id,
                allowed_domains=allowed if isinstance(allowed, list) else None,
                secrets=parsed_secrets if isinstance(parsed_secrets, dict) else None,
                op_vault_id=op_vault_id,
                highlight_elements=highlight_elements,
                flash_mode=flash_mode,
                thinking=thinking,
                vision=parse_vision(vision),
                judge=judge,
                judge_llm=judge_llm,
                judge_ground_truth=judge_ground_truth,
                system_prompt_extension=system_prompt_extension,
                metadata=parsed_metadata if isinstance(parsed_metadata, dict) else None,
            ),
        )
        with session.open_service(state) as service:
            result = service.execute_task(request)
    except BrowserTasksError as e:
        print_error(e.message, state, e)
        raise typer.Exit(1) from None
    except OSError as e:
        print_error(f"Could not read schema file: {e}", state)
        raise typer.Exit(1) from None

    print_task(result, state)
