"""Exception hierarchy for Browser Use API client errors.

Every HTTP or transport failure is mapped to exactly one subclass of
``ApiError``. Each subclass carries a stable ``kind`` string so callers that
serialize errors (JSON output, batch results) can branch without
isinstance checks.
"""

from typing import Any, Optional

from browser_tasks.errors import BrowserTasksError


class ApiError(BrowserTasksError):
    """Base exception for Browser Use API client errors.

    Attributes:
        message: Human-readable, actionable error description.
        status_code: HTTP status code if applicable, None otherwise.
        details: Additional error context as a dictionary.
        kind: Stable identifier of the error variant.
    """

    kind = "api_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=f"API-{self.kind}",
            details=details,
            suggestion=suggestion,
        )
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

    def verbose_str(self) -> str:
        """Return detailed error string with status code.

        Useful for debugging and verbose output modes.
        """
        if self.status_code is not None:
            return f"{self.message} ({self.status_code})"
        return self.message


# --- HTTP status errors ---


class BadRequestError(ApiError):
    """The API rejected the request parameters (400)."""

    kind = "bad_request"


class UnauthorizedError(ApiError):
    """The API key was rejected (401)."""

    kind = "unauthorized"


class NotFoundError(ApiError):
    """The requested task or endpoint does not exist (404)."""

    kind = "not_found"


class ValidationFailedError(ApiError):
    """The API could not validate the request body (422)."""

    kind = "validation_failed"


class RateLimitedError(ApiError):
    """Too many requests or concurrent sessions (429)."""

    kind = "rate_limited"


class ServerError(ApiError):
    """The API reported an internal error (500)."""

    kind = "server_error"


class UnknownHttpError(ApiError):
    """Any other non-2xx status code."""

    kind = "unknown_http"


# --- Transport errors ---


class ConnectionRefusedError(ApiError):
    """Could not establish a connection to the API."""

    kind = "connection_refused"


class RequestTimeoutError(ApiError):
    """A single request exceeded the request timeout."""

    kind = "timed_out"


class UnknownTransportError(ApiError):
    """Any other transport-level failure."""

    kind = "unknown_transport"
