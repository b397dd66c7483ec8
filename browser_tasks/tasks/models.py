"""Task request data model.

``TaskRequest`` holds what a caller wants done; ``AdvancedOptions`` holds the
optional agent settings. Every advanced field defaults to "not set" and is
only serialized when set, so server-side defaults stay in effect.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from browser_tasks.errors import InvalidArgumentError
from browser_tasks.logging import get_logger
from browser_tasks.tasks.schema import SchemaSpec

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300
MIN_TIMEOUT_SECONDS = 10
MAX_TIMEOUT_SECONDS = 3600
MAX_DESCRIPTION_LENGTH = 20000
MIN_MAX_STEPS = 1
MAX_MAX_STEPS = 200

DEFAULT_LLM = "browser-use-2.0"

# Model identifiers accepted for ``llm`` and ``judge_llm``
SUPPORTED_LLMS = (
    "browser-use-2.0",
    "browser-use-llm",
    "claude-opus-4-5-20251101",
    "claude-sonnet-4-5-20250929",
    "gemini-3-flash-preview",
    "gemini-3-pro-preview",
    "gemini-flash-latest",
    "gemini-flash-lite-latest",
    "gpt-4.1",
    "gpt-4.1-mini",
    "o3",
)


class TaskStatus(str, Enum):
    """Task states reported by the API.

    Only ``FINISHED`` and ``STOPPED`` are terminal; any other value,
    including ones not listed here, means the task is still in progress.
    """

    RUNNING = "running"
    FINISHED = "finished"
    STOPPED = "stopped"


TERMINAL_STATES = frozenset({TaskStatus.FINISHED.value, TaskStatus.STOPPED.value})

# Filters accepted by list_tasks; "all" disables filtering
LIST_FILTERS = ("all", "finished", "running", "stopped")

# Statuses a caller may set through update_task
UPDATABLE_STATUSES = ("running", "stopped")

VisionMode = Union[str, bool]


def parse_json_option(value: Any, fallback: Any = None) -> Any:
    """Leniently decode a JSON-valued option.

    Empty values return ``fallback``. Strings are decoded as JSON; a decoding
    failure logs a warning and returns ``fallback``. Other values are
    returned as-is.
    """
    if not value:
        return fallback
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring option that is not valid JSON: {e.msg}")
            return fallback
    return value


@dataclass
class AdvancedOptions:
    """Optional agent settings.

    Attributes:
        llm: Model used to drive the agent (see ``SUPPORTED_LLMS``)
        max_steps: Maximum number of agent steps (1-200)
        session_id: Run inside an existing session to reuse browser state
        allowed_domains: Restrict browsing to these domains
        secrets: Values available to the agent, never shown in prompts
        op_vault_id: 1Password vault to use for credentials
        highlight_elements: Highlight interacted elements
        flash_mode: Faster, less careful execution
        thinking: Enable reasoning visualization
        vision: ``"auto"``, True or False
        judge: Judge the task result with a second model
        judge_llm: Model used for judging
        judge_ground_truth: Expected answer for the judge
        system_prompt_extension: Extra instructions appended to the system prompt
        metadata: Caller metadata attached to the task (string values)
    """

    llm: Optional[str] = None
    max_steps: Optional[int] = None
    session_id: Optional[str] = None
    allowed_domains: Optional[list[str]] = None
    secrets: Optional[dict[str, str]] = None
    op_vault_id: Optional[str] = None
    highlight_elements: bool = False
    flash_mode: bool = False
    thinking: bool = False
    vision: Optional[VisionMode] = None
    judge: bool = False
    judge_llm: Optional[str] = None
    judge_ground_truth: Optional[str] = None
    system_prompt_extension: Optional[str] = None
    metadata: Optional[dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "AdvancedOptions":
        """Build options from a loose mapping using API (camelCase) or
        Python (snake_case) keys. JSON-valued options may be strings."""
        data = parse_json_option(data, fallback={})
        if not isinstance(data, dict):
            raise InvalidArgumentError(
                "Advanced options must be a JSON object.",
                error_code="VALIDATION-InvalidAdvancedOptions",
                details={"provided_type": type(data).__name__},
            )
        aliases = {
            "maxSteps": "max_steps",
            "sessionId": "session_id",
            "allowedDomains": "allowed_domains",
            "opVaultId": "op_vault_id",
            "highlightElements": "highlight_elements",
            "flashMode": "flash_mode",
            "judgeLlm": "judge_llm",
            "judgeGroundTruth": "judge_ground_truth",
            "systemPromptExtension": "system_prompt_extension",
        }
        known = set(cls.__dataclass_fields__)
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name not in known:
                logger.warning(f"Ignoring unknown advanced option '{key}'")
                continue
            values[name] = value

        allowed = parse_json_option(values.get("allowed_domains"))
        values["allowed_domains"] = allowed if isinstance(allowed, list) else None
        for name in ("secrets", "metadata"):
            parsed = parse_json_option(values.get(name))
            values[name] = parsed if isinstance(parsed, dict) else None
        return cls(**values)

    def to_payload(self) -> dict[str, Any]:
        """Serialize the options that are set, using API field names.

        ``metadata`` is not included; the request builder merges it.
        """
        payload: dict[str, Any] = {}
        if self.max_steps:
            payload["maxSteps"] = self.max_steps
        if self.llm:
            payload["llm"] = self.llm
        if self.session_id:
            session_id = self.session_id.strip()
            if session_id:
                payload["sessionId"] = session_id
        if isinstance(self.allowed_domains, list):
            payload["allowedDomains"] = self.allowed_domains
        if isinstance(self.secrets, dict):
            payload["secrets"] = self.secrets
        if self.op_vault_id:
            payload["opVaultId"] = self.op_vault_id
        if self.highlight_elements:
            payload["highlightElements"] = True
        if self.flash_mode:
            payload["flashMode"] = True
        if self.thinking:
            payload["thinking"] = True
        if self.vision is not None:
            payload["vision"] = self.vision
        if self.system_prompt_extension:
            payload["systemPromptExtension"] = self.system_prompt_extension
        if self.judge:
            payload["judge"] = True
        if self.judge_ground_truth:
            payload["judgeGroundTruth"] = self.judge_ground_truth
        if self.judge_llm:
            payload["judgeLlm"] = self.judge_llm
        return payload



# Keys accepted by TaskRequest.from_dict
_REQUEST_KEYS = frozenset(
    {
        "task",
        "description",
        "startUrl",
        "start_url",
        "timeout",
        "timeout_seconds",
        "structuredOutput",
        "structured_output",
        "schemaTemplate",
        "outputSchema",
        "advanced",
        "advancedOptions",
    }
)


@dataclass
class TaskRequest:
    """A task to submit, prior to validation.

    Attributes:
        description: Natural language instructions for the agent
        start_url: Optional absolute URL the browser opens first
        timeout_seconds: How long to wait for completion (10-3600)
        structured_output: Optional schema or template name for JSON output
        advanced: Optional agent settings
    """

    description: str
    start_url: Optional[str] = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    structured_output: Optional[SchemaSpec] = None
    advanced: AdvancedOptions = field(default_factory=AdvancedOptions)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskRequest":
        """Build a request from a mapping such as one entry of a batch file.

        Accepts ``task`` or ``description`` for the instructions,
        ``startUrl``/``start_url``, ``timeout``/``timeout_seconds``,
        ``structuredOutput``/``structured_output`` (or ``schemaTemplate``
        plus ``outputSchema``) and ``advanced``/``advancedOptions``.
        """
        for key in data:
            if key not in _REQUEST_KEYS:
                logger.warning(f"Ignoring unknown task request field '{key}'")
        structured = data.get("structured_output", data.get("structuredOutput"))
        if structured is None:
            template = data.get("schemaTemplate")
            raw_schema = data.get("outputSchema")
            if template and template != "custom":
                structured = template
            elif raw_schema:
                structured = raw_schema
        advanced = data.get("advanced", data.get("advancedOptions"))
        return cls(
            description=data.get("description", data.get("task", "")) or "",
            start_url=data.get("start_url", data.get("startUrl")),
            timeout_seconds=data.get(
                "timeout_seconds", data.get("timeout", DEFAULT_TIMEOUT_SECONDS)
            ),
            structured_output=structured,
            advanced=(
                advanced
                if isinstance(advanced, AdvancedOptions)
                else AdvancedOptions.from_dict(advanced)
            ),
        )
