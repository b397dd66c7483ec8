"""
Error handling framework for browser-tasks.

Exception hierarchy for local validation, remote task state and configuration
problems. HTTP errors are defined in ``browser_tasks.client.errors``.
"""

from browser_tasks.errors.exceptions import (
    BrowserTasksError,
    ConfigurationError,
    DescriptionValidationError,
    InvalidArgumentError,
    MaxStepsValidationError,
    MissingConfigurationError,
    MissingTaskIdError,
    SchemaValidationError,
    StartUrlValidationError,
    TaskError,
    TaskStoppedError,
    TimeoutValidationError,
    ValidationError,
)

__all__ = [
    # Base exception
    "BrowserTasksError",
    # Validation
    "ValidationError",
    "DescriptionValidationError",
    "StartUrlValidationError",
    "TimeoutValidationError",
    "MaxStepsValidationError",
    "SchemaValidationError",
    "InvalidArgumentError",
    # Task state
    "TaskError",
    "TaskStoppedError",
    "MissingTaskIdError",
    # Configuration
    "ConfigurationError",
    "MissingConfigurationError",
]
