"""
HTTP transport.

Owns method dispatch, headers, body serialization, response parsing and
error classification. Knows nothing about long-running operations.
"""

from core.transport.client import (
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    NO_BODY,
    HttpTransport,
)
from core.transport.query import build_params, encode_query_value

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "NO_BODY",
    "HttpTransport",
    "build_params",
    "encode_query_value",
]
