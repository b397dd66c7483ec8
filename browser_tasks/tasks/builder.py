"""Task creation payload builder.

Validates a ``TaskRequest`` and assembles the JSON body for ``POST /tasks``.
All validation happens here, before any network traffic.
"""

import json
from typing import Any, Optional
from urllib.parse import urlparse

from browser_tasks.errors import (
    DescriptionValidationError,
    InvalidArgumentError,
    MaxStepsValidationError,
    StartUrlValidationError,
    TimeoutValidationError,
)
from browser_tasks.tasks.models import (
    MAX_DESCRIPTION_LENGTH,
    MAX_MAX_STEPS,
    MAX_TIMEOUT_SECONDS,
    MIN_MAX_STEPS,
    MIN_TIMEOUT_SECONDS,
    AdvancedOptions,
    TaskRequest,
)
from browser_tasks.tasks.schema import normalize_schema

METADATA_SOURCE = "browser-tasks"

STRUCTURED_OUTPUT_INSTRUCTION = (
    "\n\nIMPORTANT: Extract and return data in the exact JSON structure "
    "specified. Follow the schema strictly."
)


def validate_description(description: Optional[str]) -> str:
    """Return the trimmed description or raise DescriptionValidationError."""
    if description is not None and not isinstance(description, str):
        raise DescriptionValidationError(
            "The task description must be text. Please provide a description "
            "of what you want the AI agent to do.",
            error_code="VALIDATION-InvalidDescription",
            details={"provided_type": type(description).__name__},
        )
    trimmed = (description or "").strip()
    if not trimmed:
        raise DescriptionValidationError(
            "The task description cannot be empty. Please provide a "
            "description of what you want the AI agent to do.",
            error_code="VALIDATION-EmptyDescription",
        )
    if len(trimmed) > MAX_DESCRIPTION_LENGTH:
        raise DescriptionValidationError(
            "The task description exceeds the maximum length of 20,000 "
            "characters. Please shorten your description.",
            error_code="VALIDATION-DescriptionTooLong",
            details={"length": len(trimmed), "max": MAX_DESCRIPTION_LENGTH},
        )
    return trimmed


def validate_start_url(start_url: Optional[str]) -> Optional[str]:
    """Return the trimmed URL, None when blank, or raise StartUrlValidationError."""
    if start_url is not None and not isinstance(start_url, str):
        raise StartUrlValidationError(
            "The starting URL must be text starting with http:// or https://",
            error_code="VALIDATION-InvalidUrl",
            details={"provided_type": type(start_url).__name__},
        )
    if not start_url or not start_url.strip():
        return None
    trimmed = start_url.strip()
    parsed = urlparse(trimmed)
    if not parsed.scheme or not parsed.netloc:
        raise StartUrlValidationError(
            "The starting URL has an invalid format. Please provide a valid "
            "URL starting with http:// or https://",
            error_code="VALIDATION-InvalidUrl",
            details={"provided": trimmed},
        )
    return trimmed


def validate_timeout(timeout_seconds: Any) -> int:
    """Return the timeout or raise TimeoutValidationError."""
    if (
        isinstance(timeout_seconds, bool)
        or not isinstance(timeout_seconds, int)
        or not MIN_TIMEOUT_SECONDS <= timeout_seconds <= MAX_TIMEOUT_SECONDS
    ):
        raise TimeoutValidationError(
            f"The timeout must be between {MIN_TIMEOUT_SECONDS} and "
            f"{MAX_TIMEOUT_SECONDS} seconds. Please adjust the timeout value.",
            error_code="VALIDATION-TimeoutOutOfRange",
            details={
                "provided": timeout_seconds,
                "min": MIN_TIMEOUT_SECONDS,
                "max": MAX_TIMEOUT_SECONDS,
            },
        )
    return timeout_seconds


def validate_max_steps(max_steps: Optional[int]) -> None:
    """Raise MaxStepsValidationError unless max_steps is None or an int in range."""
    if max_steps is None:
        return
    if (
        isinstance(max_steps, bool)
        or not isinstance(max_steps, int)
        or not MIN_MAX_STEPS <= max_steps <= MAX_MAX_STEPS
    ):
        raise MaxStepsValidationError(
            f"Max steps must be between {MIN_MAX_STEPS} and {MAX_MAX_STEPS}.",
            error_code="VALIDATION-MaxStepsOutOfRange",
            details={"provided": max_steps, "min": MIN_MAX_STEPS, "max": MAX_MAX_STEPS},
        )


_TEXT_OPTIONS = (
    "llm",
    "session_id",
    "op_vault_id",
    "judge_llm",
    "judge_ground_truth",
    "system_prompt_extension",
)


def validate_advanced_options(advanced: AdvancedOptions) -> None:
    """Raise InvalidArgumentError when an advanced option has the wrong type."""
    validate_max_steps(advanced.max_steps)
    for name in _TEXT_OPTIONS:
        value = getattr(advanced, name)
        if value is not None and not isinstance(value, str):
            raise InvalidArgumentError(
                f"The advanced option '{name}' must be text.",
                error_code="VALIDATION-InvalidOption",
                details={"option": name, "provided_type": type(value).__name__},
            )
    if advanced.vision is not None and not (
        isinstance(advanced.vision, bool) or advanced.vision == "auto"
    ):
        raise InvalidArgumentError(
            "The vision option must be 'auto', true or false.",
            error_code="VALIDATION-InvalidVision",
            details={"provided": advanced.vision},
        )

def build_task_payload(request: TaskRequest) -> dict[str, Any]:
    """Validate a task request and build the ``POST /tasks`` body.

    Args:
        request: Task request from the caller

    Returns:
        JSON-serializable payload; optional fields are only present when set

    Raises:
        ValidationError: A subclass naming the offending field
    """
    description = validate_description(request.description)
    start_url = validate_start_url(request.start_url)
    validate_timeout(request.timeout_seconds)
    advanced = request.advanced
    validate_advanced_options(advanced)

    payload: dict[str, Any] = {"task": description}
    if start_url:
        payload["startUrl"] = start_url
    payload.update(advanced.to_payload())

    metadata = dict(advanced.metadata) if isinstance(advanced.metadata, dict) else {}
    metadata["source"] = METADATA_SOURCE
    payload["metadata"] = metadata

    if request.structured_output is not None:
        schema = normalize_schema(request.structured_output)
        payload["structuredOutput"] = json.dumps(schema)
        payload["task"] = f"{payload['task']}{STRUCTURED_OUTPUT_INSTRUCTION}"

    return payload
