"""Tests for task creation payload building and validation."""

import json
from unittest.mock import patch

import pytest

from browser_tasks.errors import (
    DescriptionValidationError,
    InvalidArgumentError,
    MaxStepsValidationError,
    SchemaValidationError,
    StartUrlValidationError,
    TimeoutValidationError,
    ValidationError,
)
from browser_tasks.tasks.builder import (
    METADATA_SOURCE,
    STRUCTURED_OUTPUT_INSTRUCTION,
    build_task_payload,
)
from browser_tasks.tasks.models import AdvancedOptions, TaskRequest
from browser_tasks.tasks.templates import SchemaTemplate


class TestDescriptionValidation:
    def test_description_is_trimmed(self):
        payload = build_task_payload(TaskRequest("  search for kittens  "))
        assert payload["task"] == "search for kittens"

    @pytest.mark.parametrize("description", ["", "   ", "\n\t"])
    def test_blank_description_is_rejected(self, description):
        with pytest.raises(DescriptionValidationError, match="cannot be empty"):
            build_task_payload(TaskRequest(description))

    def test_max_length_is_accepted(self):
        payload = build_task_payload(TaskRequest("x" * 20000))
        assert len(payload["task"]) == 20000

    def test_over_max_length_is_rejected(self):
        with pytest.raises(DescriptionValidationError, match="20,000"):
            build_task_payload(TaskRequest("x" * 20001))

    @pytest.mark.parametrize("description", [5, 3.2, ["a"], {"text": "a"}])
    def test_non_text_description_is_rejected(self, description):
        with pytest.raises(DescriptionValidationError, match="must be text"):
            build_task_payload(TaskRequest(description))

    def test_validation_errors_share_base(self):
        with pytest.raises(ValidationError):
            build_task_payload(TaskRequest(""))


class TestTimeoutValidation:
    @pytest.mark.parametrize("timeout", [10, 300, 3600])
    def test_in_range_is_accepted(self, timeout):
        build_task_payload(TaskRequest("task", timeout_seconds=timeout))

    @pytest.mark.parametrize("timeout", [9, 0, -1, 3601])
    def test_out_of_range_is_rejected(self, timeout):
        with pytest.raises(TimeoutValidationError) as exc_info:
            build_task_payload(TaskRequest("task", timeout_seconds=timeout))

        assert exc_info.value.details["provided"] == timeout

    def test_timeout_is_not_sent(self):
        payload = build_task_payload(TaskRequest("task", timeout_seconds=60))
        assert "timeout" not in payload


class TestStartUrlValidation:
    def test_valid_url_is_included(self):
        payload = build_task_payload(
            TaskRequest("task", start_url=" https://example.com/page ")
        )
        assert payload["startUrl"] == "https://example.com/page"

    def test_blank_url_is_omitted(self):
        payload = build_task_payload(TaskRequest("task", start_url="  "))
        assert "startUrl" not in payload

    @pytest.mark.parametrize("url", ["example.com", "not a url", "/relative/path"])
    def test_invalid_url_is_rejected(self, url):
        with pytest.raises(StartUrlValidationError, match="invalid format"):
            build_task_payload(TaskRequest("task", start_url=url))


    @pytest.mark.parametrize("url", [42, ["https://example.com"]])
    def test_non_text_url_is_rejected(self, url):
        with pytest.raises(StartUrlValidationError):
            build_task_payload(TaskRequest("task", start_url=url))


class TestAdvancedOptions:
    def test_minimal_payload(self):
        payload = build_task_payload(TaskRequest("task"))
        assert payload == {"task": "task", "metadata": {"source": METADATA_SOURCE}}

    def test_set_options_are_serialized_with_api_names(self):
        options = AdvancedOptions(
            llm="gpt-4.1",
            max_steps=50,
            session_id=" sess-1 ",
            allowed_domains=["example.com"],
            secrets={"password": "hunter2"},
            op_vault_id="vault",
            highlight_elements=True,
            flash_mode=True,
            thinking=True,
            vision=False,
            judge=True,
            judge_llm="o3",
            judge_ground_truth="42",
            system_prompt_extension="Be brief",
        )
        payload = build_task_payload(TaskRequest("task", advanced=options))

        assert payload["llm"] == "gpt-4.1"
        assert payload["maxSteps"] == 50
        assert payload["sessionId"] == "sess-1"
        assert payload["allowedDomains"] == ["example.com"]
        assert payload["secrets"] == {"password": "hunter2"}
        assert payload["opVaultId"] == "vault"
        assert payload["highlightElements"] is True
        assert payload["flashMode"] is True
        assert payload["thinking"] is True
        assert payload["vision"] is False
        assert payload["judge"] is True
        assert payload["judgeLlm"] == "o3"
        assert payload["judgeGroundTruth"] == "42"
        assert payload["systemPromptExtension"] == "Be brief"

    def test_false_flags_are_omitted(self):
        payload = build_task_payload(
            TaskRequest("task", advanced=AdvancedOptions(flash_mode=False))
        )
        assert "flashMode" not in payload
        assert "vision" not in payload

    @pytest.mark.parametrize("steps", [0, 201, "10", 10.0, True])
    def test_max_steps_out_of_range(self, steps):
        with pytest.raises(MaxStepsValidationError):
            build_task_payload(
                TaskRequest("task", advanced=AdvancedOptions(max_steps=steps))
            )

    @pytest.mark.parametrize(
        "options",
        [
            AdvancedOptions(session_id=7),
            AdvancedOptions(llm=["gpt-4.1"]),
            AdvancedOptions(vision="sometimes"),
        ],
    )
    def test_wrongly_typed_options_are_rejected(self, options):
        with pytest.raises(InvalidArgumentError):
            build_task_payload(TaskRequest("task", advanced=options))

    def test_caller_metadata_is_merged(self):
        options = AdvancedOptions(metadata={"run": "nightly", "source": "mine"})
        payload = build_task_payload(TaskRequest("task", advanced=options))

        assert payload["metadata"] == {"run": "nightly", "source": METADATA_SOURCE}
        # Caller's dict untouched
        assert options.metadata["source"] == "mine"

    def test_from_dict_parses_json_strings(self):
        options = AdvancedOptions.from_dict(
            {
                "maxSteps": 10,
                "allowedDomains": '["a.com", "b.com"]',
                "secrets": "not json",
                "metadata": '{"team": "qa"}',
                "unknownOption": 1,
            }
        )

        assert options.max_steps == 10
        assert options.allowed_domains == ["a.com", "b.com"]
        assert options.secrets is None
        assert options.metadata == {"team": "qa"}


class TestStructuredOutput:
    def test_schema_is_serialized_and_instruction_appended(self):
        payload = build_task_payload(
            TaskRequest("Get the product", structured_output={"name": "string"})
        )

        assert json.loads(payload["structuredOutput"]) == {
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
        }
        assert payload["task"] == f"Get the product{STRUCTURED_OUTPUT_INSTRUCTION}"
        assert "Follow the schema strictly." in payload["task"]

    def test_template(self):
        payload = build_task_payload(
            TaskRequest("Read the post", structured_output=SchemaTemplate.ARTICLE)
        )
        schema = json.loads(payload["structuredOutput"])
        assert schema["required"] == ["title", "content"]

    def test_invalid_schema_is_rejected_locally(self):
        with pytest.raises(SchemaValidationError):
            build_task_payload(TaskRequest("task", structured_output=[]))

    def test_no_structured_output_by_default(self):
        payload = build_task_payload(TaskRequest("task"))
        assert "structuredOutput" not in payload


class TestTaskRequestFromDict:
    def test_batch_entry(self):
        request = TaskRequest.from_dict(
            {
                "task": "Find it",
                "startUrl": "https://example.com",
                "timeout": 60,
                "schemaTemplate": "company",
                "advancedOptions": {"flashMode": True},
            }
        )

        assert request.description == "Find it"
        assert request.start_url == "https://example.com"
        assert request.timeout_seconds == 60
        assert request.structured_output == "company"
        assert request.advanced.flash_mode is True

    def test_custom_template_uses_output_schema(self):
        request = TaskRequest.from_dict(
            {
                "task": "Find it",
                "schemaTemplate": "custom",
                "outputSchema": '{"title": "string"}',
            }
        )
        assert request.structured_output == '{"title": "string"}'

    def test_string_max_steps_from_batch_entry(self):
        request = TaskRequest.from_dict({"task": "x", "advanced": {"maxSteps": "10"}})

        with pytest.raises(MaxStepsValidationError):
            build_task_payload(request)

    def test_non_text_task_from_batch_entry(self):
        request = TaskRequest.from_dict({"task": 5})

        with pytest.raises(DescriptionValidationError):
            build_task_payload(request)

    @pytest.mark.parametrize("advanced", [["flashMode"], 3, '["a"]'])
    def test_advanced_must_be_an_object(self, advanced):
        with pytest.raises(InvalidArgumentError, match="JSON object"):
            TaskRequest.from_dict({"task": "x", "advanced": advanced})

    def test_advanced_as_json_text(self):
        request = TaskRequest.from_dict(
            {"task": "x", "advancedOptions": '{"flashMode": true}'}
        )
        assert request.advanced.flash_mode is True

    def test_unknown_fields_are_reported(self):
        with patch("browser_tasks.tasks.models.logger") as logger:
            request = TaskRequest.from_dict({"task": "x", "maxSteps": 10})

        assert request.advanced.max_steps is None
        logger.warning.assert_called_once()
        assert "maxSteps" in logger.warning.call_args[0][0]
