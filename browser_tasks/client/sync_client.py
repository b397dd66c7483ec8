"""Synchronous HTTP client for the Browser Use API.

This module provides SyncBrowserUseClient, a thin wrapper over an
authenticated ``httpx.Client``. It serializes JSON, applies the request
timeout and maps every failure into the ``ApiError`` taxonomy. Requests are
never retried automatically.
"""

from typing import Any, Optional

import httpx

from browser_tasks.client.core import map_transport_error, parse_response
from browser_tasks.client.errors import ApiError
from browser_tasks.config.credentials import get_authenticated_http_client
from browser_tasks.config.settings import BrowserUseSettings, get_browser_use_settings
from browser_tasks.logging import get_logger

logger = get_logger(__name__)


class SyncBrowserUseClient:
    """Synchronous HTTP client for the Browser Use task API.

    Usage:
        with SyncBrowserUseClient() as client:
            task = client.get("/tasks/abc")

    Attributes:
        settings: Settings the client was built from
    """

    def __init__(
        self,
        settings: Optional[BrowserUseSettings] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Explicit settings (defaults to environment settings)
            base_url: Base URL override, e.g. from the --url flag
            transport: httpx transport override, used by tests
        """
        settings = settings or get_browser_use_settings()
        if base_url:
            settings = settings.model_copy(update={"base_url": base_url.rstrip("/")})
        self.settings = settings
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    def __enter__(self) -> "SyncBrowserUseClient":
        """Enter context manager, creating the authenticated httpx.Client."""
        self._client = get_authenticated_http_client(
            self.settings, transport=self._transport
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """Exit context manager, closing httpx.Client."""
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def call(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: API path appended to the base URL, e.g. ``/tasks``
            body: JSON request body, omitted when None
            timeout: Override the request timeout for this call

        Returns:
            Parsed JSON response

        Raises:
            ApiError: Mapped HTTP or transport failure
        """
        if self._client is None:
            raise RuntimeError(
                "Client not initialized. Use 'with SyncBrowserUseClient() as client:'"
            )

        url = f"{self.base_url}{path}"
        effective_timeout = timeout or self.settings.request_timeout
        logger.debug(f"{method} {url}")

        try:
            response = self._client.request(
                method=method,
                url=path,
                json=body,
                timeout=effective_timeout,
            )
        except httpx.HTTPError as e:
            error = map_transport_error(e, url)
            logger.debug(f"{method} {url} failed: {error.kind} ({e})")
            raise error from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return parse_response(response)

    def get(self, path: str, timeout: Optional[float] = None) -> Any:
        """Make GET request."""
        return self.call("GET", path, timeout=timeout)

    def post(
        self, path: str, body: Optional[Any] = None, timeout: Optional[float] = None
    ) -> Any:
        """Make POST request."""
        return self.call("POST", path, body=body, timeout=timeout)

    def patch(
        self, path: str, body: Optional[Any] = None, timeout: Optional[float] = None
    ) -> Any:
        """Make PATCH request."""
        return self.call("PATCH", path, body=body, timeout=timeout)

    def health_check(self) -> bool:
        """Check if the API accepts our credentials.

        Issues ``GET /tasks`` with a short timeout. Does not raise on API
        failures - returns False instead.

        Returns:
            True if the server responds successfully, False otherwise
        """
        try:
            self.call("GET", "/tasks", timeout=5.0)
            return True
        except ApiError as e:
            logger.debug(f"Health check failed: {e.verbose_str()}")
            return False
