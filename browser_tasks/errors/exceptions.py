"""
Exception hierarchy for browser-tasks.

Local errors raised before any network traffic (validation), errors derived
from the remote task state (stopped tasks, malformed creation responses) and
configuration errors all share a common base so callers can catch every
library failure with a single except clause.

HTTP and transport failures live in ``browser_tasks.client.errors`` and also
inherit from ``BrowserTasksError``.
"""

from typing import Any, Optional


class BrowserTasksError(Exception):
    """
    Base exception class for all browser-tasks errors.

    Attributes:
        message: Human-readable error message
        error_code: Optional error code for reference and documentation
        details: Optional dictionary with additional error details
        suggestion: Optional suggestion text for how to fix the error
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestion = suggestion
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for JSON output."""
        result: dict[str, Any] = {"message": self.message}
        if self.error_code:
            result["error_code"] = self.error_code
        if self.details:
            result["details"] = self.details
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


# --- Validation Errors ---


class ValidationError(BrowserTasksError):
    """
    Exception raised when task parameters fail local validation.

    Validation happens before any request is sent, so a ValidationError
    never has side effects on the remote service and is never retried.

    Examples:
        Out of range:
            >>> raise TimeoutValidationError(
            ...     message="The timeout must be between 10 and 3600 seconds",
            ...     error_code="VALIDATION-TimeoutOutOfRange",
            ...     details={"provided": 5, "min": 10, "max": 3600},
            ... )
    """

    pass


class DescriptionValidationError(ValidationError):
    """Task description is blank or too long."""

    pass


class StartUrlValidationError(ValidationError):
    """Starting URL is not an absolute URL."""

    pass


class TimeoutValidationError(ValidationError):
    """Task timeout is outside the accepted range."""

    pass


class MaxStepsValidationError(ValidationError):
    """Maximum agent steps is outside the accepted range."""

    pass


class SchemaValidationError(ValidationError):
    """Structured output schema is missing or malformed."""

    pass


class InvalidArgumentError(ValidationError):
    """A lifecycle operation argument is missing or invalid."""

    pass


# --- Task Errors ---


class TaskError(BrowserTasksError):
    """
    Base class for errors derived from the state of a remote task.

    Attributes:
        task_id: Identifier of the task, when known
    """

    def __init__(
        self,
        message: str,
        task_id: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(
            message, error_code=error_code, details=details, suggestion=suggestion
        )
        self.task_id = task_id


class TaskStoppedError(TaskError):
    """The remote service reported the task as stopped."""

    pass


class MissingTaskIdError(TaskError):
    """The task creation response did not contain a task id."""

    pass


# --- Configuration Errors ---


class ConfigurationError(BrowserTasksError):
    """Base class for configuration problems (environment, settings)."""

    pass


class MissingConfigurationError(ConfigurationError):
    """A required configuration value such as the API key is not set."""

    pass
