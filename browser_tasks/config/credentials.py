"""
Credential handling for the Browser Use API.

Loads the API key from settings, validates it and builds an authenticated
``httpx.Client`` that injects the key header into every request.
"""

from typing import Optional

import httpx

from browser_tasks.config.settings import BrowserUseSettings, get_browser_use_settings
from browser_tasks.errors import MissingConfigurationError
from browser_tasks.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-Browser-Use-API-Key"


class CredentialProvider:
    """
    Provides access to the Browser Use API key.

    The key is kept as a ``SecretStr`` inside settings and only revealed
    when the request headers are built.
    """

    def __init__(self, settings: Optional[BrowserUseSettings] = None) -> None:
        self.settings = settings or get_browser_use_settings()

    def get_api_key(self) -> str:
        """
        Return the configured API key.

        Raises:
            MissingConfigurationError: If no non-blank key is configured
        """
        secret = self.settings.api_key
        value = secret.get_secret_value().strip() if secret is not None else ""
        if not value:
            raise MissingConfigurationError(
                message="No Browser Use API key is configured",
                error_code="CONFIG-MissingApiKey",
                details={"env_var": "BROWSER_USE_API_KEY"},
                suggestion=(
                    "Set BROWSER_USE_API_KEY in the environment or in a .env file. "
                    "Keys are available at https://cloud.browser-use.com"
                ),
            )
        return value

    def auth_headers(self) -> dict[str, str]:
        """Build the request headers carrying the API key."""
        return {
            API_KEY_HEADER: self.get_api_key(),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }


def get_authenticated_http_client(
    settings: Optional[BrowserUseSettings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create an ``httpx.Client`` bound to the API base URL with auth headers.

    Args:
        settings: Settings to use instead of the cached environment settings
        transport: Optional transport override, used by tests

    Returns:
        Configured client; the caller owns it and must close it

    Raises:
        MissingConfigurationError: If no API key is configured
    """
    settings = settings or get_browser_use_settings()
    headers = CredentialProvider(settings).auth_headers()
    logger.debug(f"Creating authenticated client for {settings.base_url}")
    return httpx.Client(
        base_url=settings.base_url,
        headers=headers,
        timeout=settings.request_timeout,
        transport=transport,
    )
