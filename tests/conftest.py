"""
Global test fixtures for browser-tasks.

HTTP traffic is served by ``httpx.MockTransport``; no test touches the
network.
"""

from typing import Callable

import httpx
import pytest

from browser_tasks.client.sync_client import SyncBrowserUseClient
from browser_tasks.config import BrowserUseSettings, clear_settings_cache

TEST_API_KEY = "test-key"
TEST_BASE_URL = "https://api.test/api/v2"


@pytest.fixture(autouse=True)
def clear_cache(monkeypatch):
    """Isolate tests from the developer's environment and settings cache."""
    for var in (
        "BROWSER_USE_API_KEY",
        "BROWSER_USE_BASE_URL",
        "BROWSER_USE_REQUEST_TIMEOUT",
        "BROWSER_USE_POLL_INTERVAL",
        "BROWSER_USE_CLOUD_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> BrowserUseSettings:
    return BrowserUseSettings(
        api_key=TEST_API_KEY, base_url=TEST_BASE_URL, poll_interval=0.0
    )


@pytest.fixture
def make_client(settings) -> Callable[..., SyncBrowserUseClient]:
    """Factory for an open client whose requests go to ``handler``.

    Clients are closed at teardown.
    """
    opened: list[SyncBrowserUseClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        client = SyncBrowserUseClient(
            settings=settings, transport=httpx.MockTransport(handler)
        )
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.close()


class FakeClock:
    """Manually advanced monotonic clock; ``sleep`` advances it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
