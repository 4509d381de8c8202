"""
Unified exception hierarchy for the Stack0 client.

Provides typed exceptions with a category so callers can decide what to
do with a failure. Transport-level failures (HTTP status, network) and
operation-level failures (terminal failure, deadline, cancellation) share
one base class.
"""

from typing import Any

# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import ErrorCategory


class Stack0Error(Exception):
    """
    Base exception for all client errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# HTTP Errors (classified from response status)
# =============================================================================


class ApiError(Stack0Error):
    """
    Non-2xx response from the API.

    Attributes:
        status_code: HTTP status of the response
        code: Machine-readable error code from the error payload, if any
        response: Parsed error payload (or raw text when it was not JSON)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        response: Any = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)
        self.status_code = status_code
        self.code = code
        self.response = response

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        if self.status_code is None:
            return ErrorCategory.UNKNOWN
        return classify_http_status(self.status_code)


class AuthenticationError(ApiError):
    """API key missing, invalid or not allowed to access the resource (401/403)."""


class NotFoundError(ApiError):
    """Resource does not exist (404)."""


class ValidationError(ApiError):
    """Request rejected by server-side validation (400/409/422)."""


class RateLimitError(ApiError):
    """Rate limited (429)."""


# =============================================================================
# Network Errors (no response)
# =============================================================================


class NetworkError(Stack0Error):
    """Request never produced a response (DNS, refused, reset, timed out)."""

    category = ErrorCategory.TRANSIENT


# =============================================================================
# Operation Errors (raised by the poller)
# =============================================================================


class OperationError(Stack0Error):
    """
    Base class for long-running operation failures.

    Attributes:
        handle: Identifier of the operation being waited on (None if the
            operation was never submitted)
        snapshot: Last snapshot observed before the failure, if any
    """

    def __init__(
        self,
        message: str,
        handle: Any = None,
        snapshot: Any = None,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)
        self.handle = handle
        self.snapshot = snapshot


class OperationFailed(OperationError):
    """Operation reached a terminal status that is not a success."""

    category = ErrorCategory.PERMANENT

    def __init__(
        self,
        reason: str,
        handle: Any = None,
        snapshot: Any = None,
        context: dict | None = None,
    ):
        super().__init__(reason, handle=handle, snapshot=snapshot, context=context)
        self.reason = reason


class OperationTimeout(OperationError):
    """Deadline expired while the operation was still non-terminal."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        message: str,
        handle: Any = None,
        snapshot: Any = None,
        timeout: float | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, handle=handle, snapshot=snapshot, context=context)
        self.timeout = timeout


class OperationCancelled(OperationError):
    """Wait abandoned through a cancellation token."""

    category = ErrorCategory.PERMANENT

    def __init__(
        self,
        message: str,
        handle: Any = None,
        snapshot: Any = None,
        reason: str | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, handle=handle, snapshot=snapshot, context=context)
        self.reason = reason


# =============================================================================
# Error Classification Utilities
# =============================================================================

# status -> exception class; anything else falls back to ApiError
_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    409: ValidationError,
    422: ValidationError,
    429: RateLimitError,
}


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (401, 403):
        return ErrorCategory.AUTH

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def error_for_status(
    status_code: int,
    message: str,
    code: str | None = None,
    response: Any = None,
) -> ApiError:
    """Build the ApiError subclass matching an HTTP status."""
    error_class = _STATUS_ERRORS.get(status_code, ApiError)
    return error_class(
        message,
        status_code=status_code,
        code=code,
        response=response,
    )


def is_retryable_error(exc: Exception) -> bool:
    """
    Check if repeating the failed call could succeed.

    Only errors raised by this library are classified; anything else is
    reported as not retryable.
    """
    if isinstance(exc, Stack0Error):
        return exc.is_retryable
    return False
