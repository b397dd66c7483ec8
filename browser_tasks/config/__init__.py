"""Configuration and credentials for browser-tasks."""

from browser_tasks.config.credentials import (
    API_KEY_HEADER,
    CredentialProvider,
    get_authenticated_http_client,
)
from browser_tasks.config.settings import (
    BrowserUseSettings,
    LoggingSettings,
    clear_settings_cache,
    get_browser_use_settings,
    get_logging_settings,
)

__all__ = [
    "API_KEY_HEADER",
    "BrowserUseSettings",
    "CredentialProvider",
    "LoggingSettings",
    "clear_settings_cache",
    "get_authenticated_http_client",
    "get_browser_use_settings",
    "get_logging_settings",
]
