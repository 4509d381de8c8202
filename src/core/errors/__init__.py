"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- Stack0Error hierarchy for typed exceptions
- HTTP status classification used by the transport
"""

from core.errors.exceptions import (
    ApiError,
    AuthenticationError,
    # Enums
    ErrorCategory,
    NetworkError,
    NotFoundError,
    OperationCancelled,
    # Operation errors
    OperationError,
    OperationFailed,
    OperationTimeout,
    RateLimitError,
    # Base classes
    Stack0Error,
    ValidationError,
    # Classification utilities
    classify_http_status,
    error_for_status,
    is_retryable_error,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "Stack0Error",
    "ApiError",
    # HTTP errors
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    # Network errors
    "NetworkError",
    # Operation errors
    "OperationError",
    "OperationFailed",
    "OperationTimeout",
    "OperationCancelled",
    # Classification utilities
    "classify_http_status",
    "error_for_status",
    "is_retryable_error",
]
