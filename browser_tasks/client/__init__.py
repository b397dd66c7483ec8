"""Browser Use HTTP client module.

Provides the authenticated HTTP client used by task operations, with
consistent mapping of HTTP and transport failures to ``ApiError``.
"""

from browser_tasks.client.errors import (
    ApiError,
    BadRequestError,
    ConnectionRefusedError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    UnknownHttpError,
    UnknownTransportError,
    ValidationFailedError,
)
from browser_tasks.client.sync_client import SyncBrowserUseClient

__all__ = [
    "SyncBrowserUseClient",
    "ApiError",
    "BadRequestError",
    "UnauthorizedError",
    "NotFoundError",
    "ValidationFailedError",
    "RateLimitedError",
    "ServerError",
    "UnknownHttpError",
    "ConnectionRefusedError",
    "RequestTimeoutError",
    "UnknownTransportError",
]
