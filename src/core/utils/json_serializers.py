"""Shared JSON serialization utilities for request bodies and log records."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Decimal):
        return True, float(obj)
    if isinstance(obj, Enum):
        return True, obj.value
    if isinstance(obj, Path):
        return True, str(obj)
    if isinstance(obj, (set, frozenset)):
        return True, sorted(obj, key=str)
    if isinstance(obj, BaseModel):
        return True, obj.model_dump(mode="json", by_alias=True, exclude_none=True)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    ``default=`` hook for ``json.dumps``.

    Keeps values typed instead of stringifying everything:
    - datetime/date -> ISO 8601 string
    - Decimal -> float
    - Enum -> value
    - pydantic model -> its camelCase JSON dict
    - Everything else -> string (fallback)

    Args:
        obj: Object that the json module could not encode

    Returns:
        JSON-serializable representation
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    return str(obj)


__all__ = ["json_serializer"]
