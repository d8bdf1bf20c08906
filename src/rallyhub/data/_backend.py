"""Shared plumbing for the backend repository implementations."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TypeVar

from rallydb import AsyncRallyDBClient

from .errors import NotFound

T = TypeVar("T")


class BackendRepository:
    """Base for repositories that talk to the hosted backend."""

    def __init__(self, client: AsyncRallyDBClient) -> None:
        self._db = client


def first_or_not_found(rows: list[T], what: str) -> T:
    """Return the single row written by an update, or raise NotFound."""
    if not rows:
        raise NotFound(f"{what} not found")
    return rows[0]


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()
