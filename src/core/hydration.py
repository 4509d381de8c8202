"""
Response hydration: wire-format timestamp strings -> datetime.

The API returns timestamps as ISO-8601 strings. Resource clients declare
which fields of each response shape are timestamps and run decoded
responses through these helpers before handing them to the caller.

Every helper is pure (input is never mutated), total (missing optional
fields and unparseable strings are left alone) and idempotent (values that
are already datetimes pass through untouched).
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Any:
    """
    Convert an ISO-8601 string to a timezone-aware datetime.

    A trailing ``Z`` is accepted and naive values are assumed to be UTC.
    Non-string values are returned unchanged, as are strings that do not
    parse (logged at DEBUG).
    """
    if not isinstance(value, str):
        return value

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Leaving unparseable timestamp as string", extra={"error_message": value[:100]})
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def hydrate(raw: Any, fields: Iterable[str]) -> Any:
    """
    Return a copy of ``raw`` with the listed timestamp fields converted.

    Only fields that are present and string-typed are touched. Non-dict
    input (e.g. a null response) is returned as-is.
    """
    if not isinstance(raw, dict):
        return raw

    hydrated = dict(raw)
    for field in fields:
        value = hydrated.get(field)
        if isinstance(value, str):
            hydrated[field] = parse_timestamp(value)
    return hydrated


def hydrate_list(items: Any, fields: Iterable[str]) -> Any:
    """Hydrate every element of a list response."""
    if not isinstance(items, list):
        return items
    fields = tuple(fields)
    return [hydrate(item, fields) for item in items]


def hydrate_page(response: Any, fields: Iterable[str], items_key: str = "items") -> Any:
    """
    Hydrate the item list of a paginated response.

    Pagination keys (``nextCursor``, ``total``...) are kept as they are.
    """
    if not isinstance(response, dict):
        return response

    page = dict(response)
    if items_key in page:
        page[items_key] = hydrate_list(page[items_key], fields)
    return page


__all__ = [
    "parse_timestamp",
    "hydrate",
    "hydrate_list",
    "hydrate_page",
]
