"""Shared plumbing for services that read through the query cache."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..query.cache import QueryCache
from ..query.keys import QueryKey
from ..query.policy import invalidates, stale_time

T = TypeVar("T")


class CachedService:
    """Base for feature services: cached reads, invalidating mutations."""

    def __init__(self, cache: QueryCache) -> None:
        self._cache = cache

    async def _read(
        self, key: QueryKey, query: str, fetcher: Callable[[], Awaitable[T]],
    ) -> T:
        return await self._cache.fetch(key, fetcher, stale_time=stale_time(query))

    def _seed(self, key: QueryKey, query: str, data: object) -> None:
        self._cache.set_data(key, data, stale_time=stale_time(query))

    def _invalidate(self, mutation: str, **ids: str) -> None:
        self._cache.invalidate_many(invalidates(mutation, **ids))

    def _forget(self, key: QueryKey) -> None:
        """Drop cached data for a row that no longer exists."""
        self._cache.remove(key)
