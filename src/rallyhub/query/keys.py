"""Query key registry.

Keys are tuples ``(domain, "list" | "detail" | subresource, *discriminators)``.
Equal discriminators give equal keys; invalidating a prefix such as
``users.all`` or ``users.lists()`` reaches every key below it.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

QueryKey = tuple[Hashable, ...]


@dataclass(frozen=True)
class FilterSet:
    """Hashable, order-insensitive snapshot of a filter mapping."""

    items: tuple[tuple[str, Hashable], ...]

    def as_dict(self) -> dict[str, Any]:
        return dict(self.items)


def freeze(value: Any) -> Hashable:
    """Convert filter values into hashable equivalents.

    Mappings become ``FilterSet`` so a filter mapping never compares equal to
    a plain tuple discriminator.
    """
    if isinstance(value, FilterSet):
        return value
    if isinstance(value, Mapping):
        return FilterSet(tuple(sorted((str(k), freeze(v)) for k, v in value.items())))
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    hash(value)  # unhashable discriminators fail here rather than inside the cache
    return value


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    """True when *key* equals *prefix* or lies below it."""
    return key[: len(prefix)] == prefix


class ResourceKeys:
    """Key factory for one resource domain."""

    def __init__(self, domain: str) -> None:
        self.domain = domain
        self.all: QueryKey = (domain,)

    def lists(self) -> QueryKey:
        return (*self.all, "list")

    def list(self, filters: Mapping[str, Any] | None = None) -> QueryKey:
        return (*self.lists(), freeze(filters or {}))

    def details(self) -> QueryKey:
        return (*self.all, "detail")

    def detail(self, item_id: Hashable) -> QueryKey:
        return (*self.details(), freeze(item_id))

    def sub(self, name: str, *discriminators: Any) -> QueryKey:
        return (*self.all, name, *(freeze(d) for d in discriminators))


class UserKeys(ResourceKeys):
    def pending(self) -> QueryKey:
        return (*self.lists(), "pending")


class RallyKeys(ResourceKeys):
    def upcoming(self, limit: int) -> QueryKey:
        return self.sub("upcoming", limit)

    def featured(self, limit: int) -> QueryKey:
        return self.sub("featured", limit)


class ChampionshipKeys(ResourceKeys):
    def public(self) -> QueryKey:
        return self.sub("public")

    def rallies(self, championship_id: str) -> QueryKey:
        return (*self.detail(championship_id), "rallies")

    def results(self, championship_id: str) -> QueryKey:
        return (*self.detail(championship_id), "results")


class GameKeys(ResourceKeys):
    def classes(self, game_id: str) -> QueryKey:
        return self.sub("classes", game_id)

    def events(self, game_id: str) -> QueryKey:
        return self.sub("events", game_id)

    def tracks(self, event_id: str) -> QueryKey:
        return self.sub("tracks", event_id)


class NewsKeys(ResourceKeys):
    def public(self) -> QueryKey:
        return self.sub("public")

    def latest(self, limit: int) -> QueryKey:
        return (*self.public(), "latest", limit)


class TeamKeys(ResourceKeys):
    def members(self, team_id: str) -> QueryKey:
        return (*self.detail(team_id), "members")

    def pending_applications(self) -> QueryKey:
        return self.sub("pending-applications")

    def user_status(self, user_id: str) -> QueryKey:
        return self.sub("user-status", user_id)

    def player_team(self, user_id: str) -> QueryKey:
        return self.sub("player-team", user_id)


class RegistrationKeys(ResourceKeys):
    def rally(self, rally_id: str) -> QueryKey:
        return self.sub("rally", rally_id)

    def user(self, user_id: str) -> QueryKey:
        return self.sub("user", user_id)

    def classes(self, rally_id: str) -> QueryKey:
        return self.sub("classes", rally_id)


class ResultKeys(ResourceKeys):
    def rally(self, rally_id: str) -> QueryKey:
        return self.sub("rally", rally_id)


class VehicleKeys(ResourceKeys):
    def for_game(self, game_id: str) -> QueryKey:
        return self.sub("game", game_id)


users = UserKeys("users")
rallies = RallyKeys("rallies")
championships = ChampionshipKeys("championships")
games = GameKeys("games")
news = NewsKeys("news")
teams = TeamKeys("teams")
categories = ResourceKeys("categories")
registrations = RegistrationKeys("rally-registrations")
results = ResultKeys("results")
vehicles = VehicleKeys("game-vehicles")
