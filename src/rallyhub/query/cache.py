"""In-process async query cache with staleness windows and prefix invalidation.

All access happens on one event loop, so the store needs no locking: two
mutations triggered by separate user actions simply run as sequential tasks.

Per key the cache guarantees:

* a fresh entry (inside its staleness window, not invalidated) is served
  without a request;
* concurrent readers of a non-fresh key share one in-flight request, unless
  the key was invalidated after that request started;
* a result is stored only if no request started later has already stored
  one (newer-started wins);
* a result from a request that started before an invalidation is stored as
  stale, so the next read refetches.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .. import config
from ..data.errors import TransportFailure
from .keys import QueryKey, matches

T = TypeVar("T")

logger = logging.getLogger(__name__)

_USE_DEFAULT: Any = object()


@dataclass
class CacheEntry:
    data: Any
    generation: int
    updated_at: float
    stale_time: float
    invalidated: bool = False
    error: Exception | None = None

    def is_fresh(self, now: float) -> bool:
        return not self.invalidated and now - self.updated_at < self.stale_time


class QueryCache:
    """Process-wide store of query results keyed by ``QueryKey``."""

    def __init__(
        self,
        default_timeout: float | None = config.QUERY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_timeout = default_timeout
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, tuple[int, asyncio.Future[Any]]] = {}
        self._invalidated_at: dict[QueryKey, int] = {}
        self._generations = itertools.count(1)

    # ── Reads ──────────────────────────────────────────────────

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        *,
        stale_time: float,
        timeout: float | None = _USE_DEFAULT,
    ) -> T:
        """Return cached data for *key*, calling *fetcher* when it is not fresh.

        On failure the previous data stays in the cache (see ``peek``) and the
        error propagates. A request running longer than *timeout* seconds
        raises ``TransportFailure``.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            logger.debug("cache hit %r", key)
            return entry.data

        inflight = self._inflight.get(key)
        if inflight is not None and inflight[0] > self._invalidated_at.get(key, 0):
            logger.debug("joining in-flight request for %r", key)
            return await asyncio.shield(inflight[1])

        if timeout is _USE_DEFAULT:
            timeout = self._default_timeout
        generation = next(self._generations)
        task = asyncio.ensure_future(self._run(key, generation, fetcher, stale_time, timeout))
        task.add_done_callback(_consume_exception)
        self._inflight[key] = (generation, task)
        logger.debug("cache miss %r (request %d)", key, generation)
        return await asyncio.shield(task)

    async def _run(
        self,
        key: QueryKey,
        generation: int,
        fetcher: Callable[[], Awaitable[Any]],
        stale_time: float,
        timeout: float | None,
    ) -> Any:
        try:
            try:
                async with asyncio.timeout(timeout):
                    data = await fetcher()
            except TimeoutError as exc:
                raise TransportFailure(f"Query {key!r} timed out after {timeout}s") from exc
        except Exception as exc:
            entry = self._entries.get(key)
            if entry is not None:
                entry.error = exc
            logger.warning("query %r failed: %s", key, exc)
            raise
        finally:
            current = self._inflight.get(key)
            if current is not None and current[0] == generation:
                del self._inflight[key]
        self._store(key, data, generation, stale_time)
        return data

    def _store(self, key: QueryKey, data: Any, generation: int, stale_time: float) -> None:
        entry = self._entries.get(key)
        if entry is not None and entry.generation > generation:
            logger.debug("dropping superseded result %d for %r", generation, key)
            return
        invalidated_at = self._invalidated_at.get(key, 0)
        stale = invalidated_at > generation
        if not stale:
            self._invalidated_at.pop(key, None)
        self._entries[key] = CacheEntry(
            data=data,
            generation=generation,
            updated_at=self._clock(),
            stale_time=stale_time,
            invalidated=stale,
        )

    def peek(self, key: QueryKey) -> Any | None:
        """Cached data for *key* regardless of staleness, or None."""
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def entry(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or not entry.is_fresh(self._clock())

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    # ── Writes ─────────────────────────────────────────────────

    def set_data(self, key: QueryKey, data: Any, *, stale_time: float) -> None:
        """Seed *key* with data already known to be current (e.g. a mutation result)."""
        self._store(key, data, next(self._generations), stale_time)

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every key under *prefix* stale; returns the number of cached entries hit."""
        marker = next(self._generations)
        hit = 0
        for key, entry in self._entries.items():
            if matches(key, prefix):
                entry.invalidated = True
                self._invalidated_at[key] = marker
                hit += 1
        for key in self._inflight:
            if matches(key, prefix):
                self._invalidated_at[key] = marker
        logger.info("invalidated %d entries under %r", hit, prefix)
        return hit

    def invalidate_many(self, prefixes: list[QueryKey]) -> int:
        return sum(self.invalidate(prefix) for prefix in prefixes)

    def remove(self, prefix: QueryKey) -> None:
        """Drop every cached entry under *prefix*."""
        for key in [k for k in self._entries if matches(k, prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()
        self._invalidated_at.clear()

    def scope(self) -> QueryScope:
        return QueryScope(self)


class QueryScope:
    """Requests issued on behalf of one view.

    Closing the scope cancels its outstanding waiters. The shared request
    itself keeps running and still lands in the cache.

    Usage:
        async with cache.scope() as scope:
            rallies = await scope.fetch(keys.rallies.lists(), load, stale_time=120)
    """

    def __init__(self, cache: QueryCache) -> None:
        self._cache = cache
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    async def __aenter__(self) -> QueryScope:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.close()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Callable[[], Awaitable[T]],
        **kwargs: Any,
    ) -> T:
        if self._closed:
            raise RuntimeError("query scope is closed")
        task = asyncio.ensure_future(self._cache.fetch(key, fetcher, **kwargs))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await task

    def close(self) -> None:
        self._closed = True
        for task in list(self._tasks):
            task.cancel()


def _consume_exception(task: asyncio.Future[Any]) -> None:
    # Waiters that were cancelled never retrieve the error; the cache already logged it.
    if not task.cancelled():
        task.exception()
