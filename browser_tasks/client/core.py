"""Core shared logic for the Browser Use HTTP client.

Pure functions that turn httpx responses and exceptions into parsed JSON or
into the ``ApiError`` taxonomy. Kept separate from the client class so they
can be tested without any transport.
"""

import json
from typing import Any, Optional

import httpx

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

SCHEMA_HINT = (
    'Tip: Check your JSON schema format. Properties should be objects like '
    '{"type": "string"} not just "string".'
)
STRUCTURED_HINT = "Tip: Ensure your structured output schema is valid JSON Schema format."
GENERIC_422_HINT = "Tip: Check your task description, URLs, and schema format."


def extract_error_message(body: Any, fallback: Optional[str] = None) -> str:
    """Pull a readable message out of an error response body.

    Tries, in order: ``message``, ``error``, ``detail``, ``details``, a joined
    ``errors`` list, then the whole body serialized. Falls back to the
    transport's own message when the body yields nothing.

    Args:
        body: Decoded JSON body, raw text, or None
        fallback: Message to use when the body is empty

    Returns:
        Error message, always a string
    """
    message: Any = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail", "details"):
            if body.get(key):
                message = body[key]
                break
        else:
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                message = ", ".join(str(item) for item in errors)
    if not message and body:
        message = body if isinstance(body, str) else json.dumps(body)

    if not message:
        return fallback or "Unknown error"
    if not isinstance(message, str):
        # FastAPI-style detail lists and nested objects
        message = json.dumps(message)
    return message


def _validation_message(error_message: str) -> str:
    detailed = "The request parameters could not be validated: "
    detailed += error_message or "One or more parameters are invalid"

    text = error_message.lower()
    if "schema" in text:
        detailed += f"\n\n{SCHEMA_HINT}"
    elif "structured" in text:
        detailed += f"\n\n{STRUCTURED_HINT}"
    else:
        detailed += f"\n\n{GENERIC_422_HINT}"
    return detailed


def map_http_error(
    status_code: int, body: Any, fallback: Optional[str] = None
) -> ApiError:
    """Map a non-2xx HTTP outcome to an ``ApiError`` variant.

    Args:
        status_code: HTTP response status code
        body: Decoded response body (JSON or text)
        fallback: Transport error message used when the body is empty

    Returns:
        The matching ApiError instance (not raised)
    """
    error_message = extract_error_message(body, fallback)
    details = {"response": body} if body else {}

    if status_code == 400:
        return BadRequestError(
            f"The request could not be processed: {error_message}. "
            "Please check your parameters and try again.",
            status_code=status_code,
            details=details,
            suggestion="Check request parameters and try again",
        )
    if status_code == 401:
        return UnauthorizedError(
            "Authentication was not successful. "
            "Please verify your API key in the credentials is correct.",
            status_code=status_code,
            details=details,
            suggestion="Check BROWSER_USE_API_KEY",
        )
    if status_code == 404:
        return NotFoundError(
            f"The requested resource could not be found: {error_message}. "
            "Please verify the resource exists.",
            status_code=status_code,
            details=details,
            suggestion="Verify the task id",
        )
    if status_code == 422:
        return ValidationFailedError(
            _validation_message(error_message),
            status_code=status_code,
            details=details,
        )
    if status_code == 429:
        return RateLimitedError(
            "Rate limit exceeded or too many concurrent sessions. "
            "Please try again later.",
            status_code=status_code,
            details=details,
            suggestion="Wait and retry",
        )
    if status_code == 500:
        return ServerError(
            f"The Browser Use API encountered a server issue: {error_message}. "
            "Please try again later or contact support if the issue persists.",
            status_code=status_code,
            details=details,
        )
    return UnknownHttpError(
        f"The API request was not successful (status {status_code}): "
        f"{error_message}. Please check your configuration and try again.",
        status_code=status_code,
        details=details,
    )


def map_transport_error(error: httpx.HTTPError, url: str) -> ApiError:
    """Map an httpx transport exception to an ``ApiError`` variant.

    ``httpx.TimeoutException`` is checked before ``httpx.ConnectError``
    because ``ConnectTimeout`` derives from the timeout family.
    """
    details = {"url": url, "error": str(error)}
    if isinstance(error, httpx.TimeoutException):
        return RequestTimeoutError(
            "The request to the Browser Use API timed out. "
            "Please check your network connection and try again.",
            details=details,
        )
    if isinstance(error, httpx.ConnectError):
        return ConnectionRefusedError(
            "Connection to the Browser Use API could not be established. "
            "Please verify the service is available and try again.",
            details=details,
        )
    return UnknownTransportError(
        f"An unexpected issue occurred: {error}. "
        "Please try again or contact support if the issue persists.",
        details=details,
    )


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def parse_response(response: httpx.Response) -> Any:
    """Parse an HTTP response, extracting JSON and mapping errors.

    Args:
        response: httpx Response object

    Returns:
        Decoded JSON body (dict or list), or None for an empty 2xx body

    Raises:
        ApiError: For non-2xx responses or undecodable 2xx bodies
    """
    if 200 <= response.status_code < 300:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise UnknownHttpError(
                "The Browser Use API returned a response that is not valid JSON.",
                status_code=response.status_code,
                details={
                    "error": str(e),
                    "response_text": response.text[:500],
                },
            ) from e

    raise map_http_error(
        response.status_code,
        _decode_body(response),
        fallback=response.reason_phrase or None,
    )
