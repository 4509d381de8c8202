"""
Core library: resource-agnostic building blocks of the Stack0 client.

Modules:
    transport   - aiohttp-based JSON transport with bearer auth and error classification
    polling     - Generic long-running-operation poller (submit, poll, terminal result)
    hydration   - Wire timestamp strings -> datetime on decoded responses
    errors      - Error classification and exception hierarchy
    logging     - Structured JSON logging with operation context

Design Principles:
    - No knowledge of any concrete remote resource
    - Single attempt per request, no hidden retries
    - Async-first
    - Type hints throughout
"""

from .types import ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
]
