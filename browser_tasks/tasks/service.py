"""Caller-facing task service and batch dispatch.

``BrowserUseTaskService`` exposes every task operation over one open API
client. ``run_batch`` applies an operation to several inputs with optional
per-item failure isolation.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, TypeVar

from browser_tasks.client.sync_client import SyncBrowserUseClient
from browser_tasks.config.settings import BrowserUseSettings
from browser_tasks.errors import BrowserTasksError
from browser_tasks.logging import get_logger
from browser_tasks.tasks import operations
from browser_tasks.tasks.builder import build_task_payload
from browser_tasks.tasks.models import TaskRequest
from browser_tasks.tasks.poller import TaskPoller

logger = get_logger(__name__)

T = TypeVar("T")


class BrowserUseTaskService:
    """Task operations against the Browser Use API.

    Usage:
        with BrowserUseTaskService() as service:
            result = service.execute_task(TaskRequest("Find the weather in Paris"))

    Args:
        client: Client to use; created from settings when omitted. A client
            passed in is used as-is and never opened or closed here.
        settings: Settings for a client created here
        base_url: Base URL override for a client created here
        poller_factory: Builds the poller used by ``execute_task``
    """

    def __init__(
        self,
        client: Optional[SyncBrowserUseClient] = None,
        settings: Optional[BrowserUseSettings] = None,
        base_url: Optional[str] = None,
        poller_factory: Optional[Callable[[SyncBrowserUseClient], TaskPoller]] = None,
    ) -> None:
        self.client = client or SyncBrowserUseClient(settings=settings, base_url=base_url)
        self._owns_client = client is None
        self._poller_factory = poller_factory or self._default_poller

    def __enter__(self) -> "BrowserUseTaskService":
        if self._owns_client:
            self.client.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_client:
            self.client.__exit__(exc_type, exc_val, exc_tb)

    def _default_poller(self, client: SyncBrowserUseClient) -> TaskPoller:
        return TaskPoller(
            client,
            poll_interval=client.settings.poll_interval,
            cloud_base_url=client.settings.cloud_url,
        )

    def execute_task(self, request: TaskRequest) -> dict[str, Any]:
        """Submit a task and wait for its result envelope.

        Raises:
            ValidationError: Invalid request, before any network call
            ApiError: Failed HTTP call
            MissingTaskIdError: Creation response without an id
            TaskStoppedError: The task was stopped on the server
        """
        payload = build_task_payload(request)
        poller = self._poller_factory(self.client)
        return poller.run(payload, request.timeout_seconds)

    def get_task(self, task_id: str) -> dict[str, Any]:
        return operations.get_task(self.client, task_id)

    def list_tasks(
        self,
        status_filter: str = "all",
        limit: int = operations.DEFAULT_LIST_LIMIT,
        return_all: bool = False,
    ) -> Any:
        return operations.list_tasks(
            self.client, status_filter=status_filter, limit=limit, return_all=return_all
        )

    def stop_task(self, task_id: str) -> dict[str, Any]:
        return operations.stop_task(self.client, task_id)

    def update_task(
        self,
        task_id: str,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict[str, Any]:
        return operations.update_task(
            self.client, task_id, description=description, status=status
        )

    def verify_credentials(self) -> bool:
        """Check that the configured API key is accepted."""
        return self.client.health_check()


@dataclass
class BatchItemResult:
    """Outcome of one batch item.

    Attributes:
        index: Position of the input item
        data: Operation result, or ``{"error": message}`` on a captured failure
        error: The captured exception, if any
    """

    index: int
    data: Any
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_batch(
    items: Iterable[T],
    handler: Callable[[T], Any],
    continue_on_fail: bool = False,
) -> list[BatchItemResult]:
    """Apply ``handler`` to each item in order.

    Items share no state: each call gets its own input and produces its own
    result. List results are flattened into one entry per element.

    Args:
        items: Inputs to process
        handler: Operation to run for one item
        continue_on_fail: Record failures as ``{"error": message}`` results
            and continue, instead of raising

    Returns:
        Results in input order

    Raises:
        BrowserTasksError: The first failure, when ``continue_on_fail`` is off
    """
    results: list[BatchItemResult] = []
    for index, item in enumerate(items):
        try:
            data = handler(item)
        except BrowserTasksError as e:
            if not continue_on_fail:
                raise
            logger.warning(f"Batch item {index} failed: {e.message}")
            results.append(BatchItemResult(index, {"error": e.message}, error=e))
            continue

        if isinstance(data, list):
            results.extend(BatchItemResult(index, entry) for entry in data)
        else:
            results.append(BatchItemResult(index, data))
    return results
