"""
Settings manager for browser-tasks.

Provides access to configuration with environment variable overrides.
Values are read from the process environment and from a ``.env`` file
loaded at package import.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.browser-use.com/api/v2"
DEFAULT_CLOUD_URL = "https://cloud.browser-use.com"


class BrowserUseSettings(BaseSettings):
    """Browser Use API settings.

    Environment variables:
        BROWSER_USE_API_KEY: API key sent with every request. Required for
            any network call.
        BROWSER_USE_BASE_URL: Base URL of the v2 API.
        BROWSER_USE_REQUEST_TIMEOUT: Per-request timeout in seconds. Default: 30
        BROWSER_USE_POLL_INTERVAL: Minimum delay between status polls in
            seconds. Default: 1.0
        BROWSER_USE_CLOUD_URL: Base URL of the web dashboard used to build
            links to agent sessions.
    """

    api_key: Optional[SecretStr] = Field(default=None)
    base_url: str = Field(default=DEFAULT_BASE_URL)
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single HTTP round-trip in seconds",
    )
    poll_interval: float = Field(
        default=1.0,
        ge=0,
        description="Minimum delay between two status polls in seconds",
    )
    cloud_url: str = Field(default=DEFAULT_CLOUD_URL)

    model_config = SettingsConfigDict(env_prefix="BROWSER_USE_")

    @field_validator("base_url", "cloud_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class LoggingSettings(BaseSettings):
    """Logging Settings."""

    level: str = Field(default="WARNING")
    dir: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="BROWSER_TASKS_LOGGING_")


# Cache settings to avoid repeated env access
@lru_cache
def get_browser_use_settings() -> BrowserUseSettings:
    """Get Browser Use settings with caching."""
    return BrowserUseSettings()


@lru_cache
def get_logging_settings() -> LoggingSettings:
    """Get logging settings with caching."""
    return LoggingSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next access re-reads the environment."""
    get_browser_use_settings.cache_clear()
    get_logging_settings.cache_clear()
