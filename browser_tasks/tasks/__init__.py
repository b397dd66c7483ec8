"""Task submission, schema normalization, polling and lifecycle operations."""

from browser_tasks.tasks.builder import build_task_payload
from browser_tasks.tasks.models import (
    SUPPORTED_LLMS,
    AdvancedOptions,
    TaskRequest,
    TaskStatus,
)
from browser_tasks.tasks.poller import TaskPoller, build_cloud_url
from browser_tasks.tasks.schema import normalize_schema
from browser_tasks.tasks.service import BatchItemResult, BrowserUseTaskService, run_batch
from browser_tasks.tasks.templates import SchemaTemplate, get_schema_template

__all__ = [
    "AdvancedOptions",
    "BatchItemResult",
    "BrowserUseTaskService",
    "SUPPORTED_LLMS",
    "SchemaTemplate",
    "TaskPoller",
    "TaskRequest",
    "TaskStatus",
    "build_cloud_url",
    "build_task_payload",
    "get_schema_template",
    "normalize_schema",
    "run_batch",
]
