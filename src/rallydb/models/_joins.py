"""Normalization of embedded (joined) resources."""

from __future__ import annotations

from typing import Any


def to_one(value: Any) -> dict[str, Any] | None:
    """Normalize an embedded to-one resource into a single row or None.

    Depending on how the foreign key is detected, the backend returns a
    to-one join as an object, a one-element list, an empty list, or null.
    Anything else is an unexpected shape and raises ``ValueError`` so that
    model validation fails.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        if not value:
            return None
        if len(value) == 1 and isinstance(value[0], dict):
            return value[0]
        raise ValueError(f"expected at most one related row, got {len(value)}")
    raise ValueError(f"unexpected related row shape: {type(value).__name__}")


def to_many(value: Any) -> list[dict[str, Any]]:
    """Normalize an embedded to-many resource into a list of rows."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list) and all(isinstance(v, dict) for v in value):
        return value
    raise ValueError(f"unexpected related rows shape: {type(value).__name__}")


def pop_related(data: Any, key: str, field: str) -> Any:
    """Pop embedded resource *key* from a raw row and return its *field*."""
    if not isinstance(data, dict) or key not in data:
        return None
    related = to_one(data.pop(key))
    return related.get(field) if related else None
