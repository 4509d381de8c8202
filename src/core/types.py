"""
Core types shared across modules.

This module provides the base enums used by the error hierarchy, the
transport and the poller so that every layer classifies failures the
same way.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    The library never retries on its own; the category tells the caller
    what a retry would likely achieve.

    Categories:
        TRANSIENT: Temporary failures that may succeed if repeated later
                   (e.g., connection failures, 429/5xx, operation deadline)
        AUTH: Credential problems (e.g., 401/403, revoked API key)
        PERMANENT: Failures that will not succeed on retry
                   (e.g., 404, validation errors, failed operations)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


__all__ = [
    "ErrorCategory",
]
