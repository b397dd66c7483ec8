"""Task lifecycle operations: get, list, stop and update.

Thin wrappers over the API client with local argument validation.
"""

from typing import Any, Optional

from browser_tasks.client.sync_client import SyncBrowserUseClient
from browser_tasks.errors import InvalidArgumentError
from browser_tasks.logging import get_logger
from browser_tasks.tasks.models import LIST_FILTERS, UPDATABLE_STATUSES, TaskStatus

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50


def _require_task_id(task_id: Optional[str]) -> str:
    if not task_id or not task_id.strip():
        raise InvalidArgumentError(
            "The task ID is required. Please provide a valid task ID.",
            error_code="VALIDATION-MissingTaskId",
        )
    return task_id.strip()


def get_task(client: SyncBrowserUseClient, task_id: str) -> dict[str, Any]:
    """Retrieve a single task."""
    return client.get(f"/tasks/{_require_task_id(task_id)}")


def list_tasks(
    client: SyncBrowserUseClient,
    status_filter: str = "all",
    limit: int = DEFAULT_LIST_LIMIT,
    return_all: bool = False,
) -> Any:
    """List tasks, filtering and truncating client-side.

    The full collection is fetched, then filtered by status (``"all"``
    keeps everything), then cut to ``limit`` unless ``return_all``.

    Args:
        client: Open API client
        status_filter: One of ``all``, ``finished``, ``running``, ``stopped``
        limit: Maximum number of tasks to return (>= 1)
        return_all: Ignore ``limit``

    Returns:
        List of tasks; a non-list response is returned unchanged

    Raises:
        InvalidArgumentError: Unknown filter or limit below 1
    """
    if status_filter not in LIST_FILTERS:
        raise InvalidArgumentError(
            f"Unknown status filter '{status_filter}'. "
            f"Valid filters are: {', '.join(LIST_FILTERS)}",
            error_code="VALIDATION-InvalidFilter",
            details={"provided": status_filter, "valid_options": list(LIST_FILTERS)},
        )
    if not return_all and (isinstance(limit, bool) or limit < 1):
        raise InvalidArgumentError(
            "The limit must be at least 1.",
            error_code="VALIDATION-InvalidLimit",
            details={"provided": limit},
        )

    response = client.get("/tasks")
    # Paginated responses wrap the collection
    if isinstance(response, dict) and isinstance(response.get("items"), list):
        response = response["items"]
    if not isinstance(response, list):
        logger.warning("Task list response is not a list; returning it unchanged")
        return response

    tasks = response
    if status_filter != "all":
        tasks = [
            task
            for task in tasks
            if isinstance(task, dict) and task.get("status") == status_filter
        ]
    if not return_all:
        tasks = tasks[:limit]
    logger.debug(f"Listed {len(tasks)} of {len(response)} tasks")
    return tasks


def stop_task(client: SyncBrowserUseClient, task_id: str) -> dict[str, Any]:
    """Stop a running task by setting its status to ``stopped``."""
    task_id = _require_task_id(task_id)
    response = client.patch(
        f"/tasks/{task_id}", body={"status": TaskStatus.STOPPED.value}
    )
    logger.info(f"Task {task_id} stop requested")
    return {
        "success": True,
        "message": "Task stopped successfully",
        **(response if isinstance(response, dict) else {}),
    }


def update_task(
    client: SyncBrowserUseClient,
    task_id: str,
    description: Optional[str] = None,
    status: Optional[str] = None,
) -> dict[str, Any]:
    """Update a task's description and/or status.

    Only the fields provided are sent.

    Raises:
        InvalidArgumentError: Blank task id, no fields, or unknown status
    """
    task_id = _require_task_id(task_id)

    body: dict[str, Any] = {}
    if description:
        body["task"] = description
    if status:
        if status not in UPDATABLE_STATUSES:
            raise InvalidArgumentError(
                f"Unknown task status '{status}'. "
                f"Valid statuses are: {', '.join(UPDATABLE_STATUSES)}",
                error_code="VALIDATION-InvalidStatus",
                details={"provided": status},
            )
        body["status"] = status
    if not body:
        raise InvalidArgumentError(
            "No fields to update were provided. Please provide a description "
            "or a status to update.",
            error_code="VALIDATION-NoUpdateFields",
        )

    return client.patch(f"/tasks/{task_id}", body=body)
