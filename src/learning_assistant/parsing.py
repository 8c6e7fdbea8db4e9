from __future__ import annotations

from typing import Any


def as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}


def first_non_empty_str(payload: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def first_item(payload: dict[str, Any], key: str) -> dict[str, Any]:
    """Return the first mapping of a list field, as used by search ``pagemap``s."""
    value = payload.get(key)
    if isinstance(value, list) and value:
        return as_dict(value[0])
    return {}
