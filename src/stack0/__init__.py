"""
Stack0 API client.

Async clients for screenshots, content extraction and AI workflows, with
submit-then-poll helpers for every long-running operation.

Usage:
    from stack0 import Stack0

    async with Stack0(api_key="sk_live_...") as client:
        shot = await client.screenshots.capture_and_wait({"url": "https://example.com"})
"""

from core import __version__
from core.errors import (
    ApiError,
    AuthenticationError,
    NetworkError,
    NotFoundError,
    OperationCancelled,
    OperationError,
    OperationFailed,
    OperationTimeout,
    RateLimitError,
    Stack0Error,
    ValidationError,
)
from core.polling import CancellationToken, PollPolicy
from stack0.client import Stack0
from stack0.resources import Extraction, Screenshots, Workflows

__all__ = [
    "__version__",
    "Stack0",
    "Screenshots",
    "Extraction",
    "Workflows",
    "CancellationToken",
    "PollPolicy",
    # Errors
    "Stack0Error",
    "ApiError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "NetworkError",
    "OperationError",
    "OperationFailed",
    "OperationTimeout",
    "OperationCancelled",
]
