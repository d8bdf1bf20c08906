"""Query layer: key registry, async cache and cache policy."""

from . import keys, policy
from .cache import CacheEntry, QueryCache, QueryScope
from .keys import FilterSet, QueryKey, freeze, matches
from .policy import STALE_TIMES, invalidates, stale_time

__all__ = [
    "CacheEntry",
    "FilterSet",
    "QueryCache",
    "QueryKey",
    "QueryScope",
    "STALE_TIMES",
    "freeze",
    "invalidates",
    "keys",
    "matches",
    "policy",
    "stale_time",
]
