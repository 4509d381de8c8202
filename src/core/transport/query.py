"""Query-string helpers shared by every resource client."""

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any


def encode_query_value(value: Any) -> str:
    """Encode one query value the way the API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def build_params(params: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, str]:
    """
    Build a query-parameter dict, dropping unset values.

    ``None`` and empty strings are omitted; ``False`` and ``0`` are kept.
    Keyword arguments are merged after ``params``.

    Example:
        >>> build_params(environment="production", projectId=None, isActive=False)
        {'environment': 'production', 'isActive': 'false'}
    """
    merged: dict[str, Any] = dict(params or {})
    merged.update(kwargs)
    return {
        key: encode_query_value(value)
        for key, value in merged.items()
        if value is not None and value != ""
    }
