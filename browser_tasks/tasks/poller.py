"""Task submission and completion polling.

``TaskPoller`` creates a task and polls ``GET /tasks/{id}`` until the API
reports a terminal state or the caller's time budget runs out:

    Submitted -> Polling -> Finished | Stopped | TimedOut

``finished`` returns a result envelope whatever the agent's own
``isSuccess`` flag says. ``stopped`` raises TaskStoppedError. On timeout one
final status query is made and its snapshot is returned with a warning.
"""

import time
from typing import Any, Callable, Optional

from browser_tasks.client.sync_client import SyncBrowserUseClient
from browser_tasks.config.settings import DEFAULT_CLOUD_URL
from browser_tasks.errors import MissingTaskIdError, TaskStoppedError
from browser_tasks.logging import get_logger
from browser_tasks.tasks.models import TaskStatus

logger = get_logger(__name__)

AGENT_SUCCESS_MESSAGE = "AI agent successfully completed the task"
AGENT_FAILURE_MESSAGE = "AI agent was unable to fully complete the task"


def build_cloud_url(
    session_id: Optional[str], cloud_base_url: str = DEFAULT_CLOUD_URL
) -> Optional[str]:
    """Link to the agent session in the web dashboard, or None."""
    if not session_id:
        return None
    return f"{cloud_base_url.rstrip('/')}/agent/{session_id}"


def timeout_warning(timeout_seconds: int) -> str:
    return (
        f"The task did not complete within {timeout_seconds} seconds "
        "but may still be running on the server"
    )


class TaskPoller:
    """Submit a task and wait for it to reach a terminal state.

    Each call to ``run`` carries its own task id, deadline and last-seen
    status, so one poller can serve several independent tasks.

    Args:
        client: Open API client
        poll_interval: Minimum seconds between two status queries; sleeps
            are cut short so they never extend past the deadline
        cloud_base_url: Dashboard URL used for ``cloudUrl``
        clock: Monotonic clock, injectable for tests
        sleep: Sleep function, injectable for tests
    """

    def __init__(
        self,
        client: SyncBrowserUseClient,
        poll_interval: float = 1.0,
        cloud_base_url: str = DEFAULT_CLOUD_URL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.cloud_base_url = cloud_base_url
        self._clock = clock
        self._sleep = sleep

    def submit(self, payload: dict[str, Any]) -> str:
        """Create the task and return its id.

        Raises:
            MissingTaskIdError: If the creation response has no ``id``
            ApiError: If the creation request fails
        """
        response = self.client.post("/tasks", body=payload)
        task_id = response.get("id") if isinstance(response, dict) else None
        if not task_id:
            raise MissingTaskIdError(
                "The Browser Use API returned an unexpected response without a "
                "task ID. Please try again or contact support if the issue persists.",
                error_code="TASK-MissingId",
                details={"response": response},
            )
        logger.info(f"Task submitted: {task_id}")
        return str(task_id)

    def fetch(self, task_id: str) -> dict[str, Any]:
        """Query the task once.

        A reply that is not a JSON object (for example an empty body) carries
        no status, so it is returned as ``{"id": task_id}`` and treated as
        still in progress.
        """
        task = self.client.get(f"/tasks/{task_id}")
        if not isinstance(task, dict):
            logger.warning(f"Task {task_id} status reply is not an object: {task!r}")
            return {"id": task_id}
        return task

    def wait(self, task_id: str, timeout_seconds: int) -> dict[str, Any]:
        """Poll a submitted task until it finishes, stops or times out.

        Args:
            task_id: Id returned by ``submit``
            timeout_seconds: Wall-clock budget for polling

        Returns:
            Result envelope

        Raises:
            TaskStoppedError: If the API reports the task as stopped
            ApiError: If a status query fails
        """
        deadline = self._clock() + timeout_seconds
        last_status: Optional[str] = None

        while self._clock() < deadline:
            task = self.fetch(task_id)
            status = task.get("status")

            if status != last_status:
                logger.debug(f"Task {task_id} status: {last_status} -> {status}")
                last_status = status

            if status == TaskStatus.FINISHED.value:
                logger.info(
                    f"Task {task_id} finished (isSuccess={task.get('isSuccess')})"
                )
                return self._finished_envelope(task)

            if status == TaskStatus.STOPPED.value:
                detail = task.get("error") or task.get("output") or (
                    "Task execution was halted"
                )
                logger.info(f"Task {task_id} was stopped: {detail}")
                raise TaskStoppedError(
                    f"The task was stopped: {detail}. Please check the task "
                    "configuration and try again.",
                    task_id=task_id,
                    error_code="TASK-Stopped",
                    details={"task": task},
                )

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            self._sleep(min(self.poll_interval, remaining))

        logger.warning(
            f"Task {task_id} did not finish within {timeout_seconds}s, "
            "fetching final snapshot"
        )
        final_task = self.fetch(task_id)
        return {
            **final_task,
            "warning": timeout_warning(timeout_seconds),
            "cloudUrl": build_cloud_url(
                final_task.get("sessionId"), self.cloud_base_url
            ),
        }

    def run(self, payload: dict[str, Any], timeout_seconds: int) -> dict[str, Any]:
        """Submit a task and wait for its result envelope."""
        task_id = self.submit(payload)
        return self.wait(task_id, timeout_seconds)

    def _finished_envelope(self, task: dict[str, Any]) -> dict[str, Any]:
        is_success = task.get("isSuccess")
        return {
            **task,
            "isSuccess": is_success,
            "agentMessage": (
                AGENT_SUCCESS_MESSAGE if is_success else AGENT_FAILURE_MESSAGE
            ),
            "cloudUrl": build_cloud_url(task.get("sessionId"), self.cloud_base_url),
        }
