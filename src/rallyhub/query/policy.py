"""Cache policy: staleness windows per query and invalidated prefixes per mutation.

Services look both tables up by name, so changing a window or widening an
invalidation set never touches service code.
"""

from __future__ import annotations

from collections.abc import Callable

from . import keys
from .keys import QueryKey

_SECOND = 1.0
_MINUTE = 60 * _SECOND

# Staleness window in seconds per query name.
STALE_TIMES: dict[str, float] = {
    "users.list": 2 * _MINUTE,
    "users.detail": 5 * _MINUTE,
    "users.pending": 30 * _SECOND,
    "rallies.list": 2 * _MINUTE,
    "rallies.detail": 5 * _MINUTE,
    "rallies.upcoming": 5 * _MINUTE,
    "rallies.featured": 5 * _MINUTE,
    "championships.list": 5 * _MINUTE,
    "championships.detail": 5 * _MINUTE,
    "championships.rallies": 5 * _MINUTE,
    "championships.results": 2 * _MINUTE,
    "championships.public": 10 * _MINUTE,
    "games.list": 5 * _MINUTE,
    "games.classes": 5 * _MINUTE,
    "games.events": 5 * _MINUTE,
    "games.tracks": 5 * _MINUTE,
    "news.latest": 5 * _MINUTE,
    "news.detail": 10 * _MINUTE,
    "news.list": 2 * _MINUTE,
    "teams.list": 2 * _MINUTE,
    "teams.detail": 2 * _MINUTE,
    "teams.members": 30 * _SECOND,
    "teams.pending_applications": 30 * _SECOND,
    "teams.player_team": 30 * _SECOND,
    "teams.user_status": 30 * _SECOND,
    "categories.list": 5 * _MINUTE,
    "registrations.rally": 2 * _MINUTE,
    "registrations.user": 2 * _MINUTE,
    "registrations.classes": 5 * _MINUTE,
    "results.rally": 2 * _MINUTE,
    "vehicles.list": 5 * _MINUTE,
    "vehicles.game": 5 * _MINUTE,
}


def stale_time(query: str) -> float:
    """Staleness window for *query*; unknown names are a programming error."""
    try:
        return STALE_TIMES[query]
    except KeyError:
        raise KeyError(f"No staleness window declared for query {query!r}") from None


def _user_status_change(user_id: str) -> list[QueryKey]:
    return [keys.users.detail(user_id), keys.users.pending(), keys.users.lists()]


def _rally_change(**_: object) -> list[QueryKey]:
    # Rounds and results embed rally names and dates.
    return [keys.rallies.all, keys.championships.all]


def _championship_change(championship_id: str) -> list[QueryKey]:
    return [keys.championships.lists(), keys.championships.detail(championship_id)]


def _championship_round_change(championship_id: str) -> list[QueryKey]:
    return [keys.championships.rallies(championship_id), keys.championships.results(championship_id)]


def _team_change(team_id: str) -> list[QueryKey]:
    return [keys.teams.lists(), keys.teams.detail(team_id)]


def _team_member_decision(team_id: str, user_id: str) -> list[QueryKey]:
    return [
        keys.teams.members(team_id),
        keys.teams.pending_applications(),
        keys.teams.player_team(user_id),
        keys.teams.user_status(user_id),
        keys.teams.lists(),
    ]


# Invalidated prefixes per mutation name; each entry takes the ids it needs as keywords.
INVALIDATIONS: dict[str, Callable[..., list[QueryKey]]] = {
    "approve_user": _user_status_change,
    "reject_user": _user_status_change,
    "delete_user": lambda user_id: [keys.users.all, keys.teams.all],
    "update_profile": lambda user_id: [keys.users.detail(user_id), keys.users.lists()],
    "create_rally": lambda: [keys.rallies.all],
    "update_rally": _rally_change,
    "delete_rally": _rally_change,
    "refresh_rally_statuses": _rally_change,
    "create_championship": _championship_change,
    "set_championship_status": _championship_change,
    "add_championship_rally": _championship_round_change,
    "remove_championship_rally": _championship_round_change,
    "create_game": lambda: [keys.games.all],
    "delete_game": lambda game_id: [keys.games.all],
    "create_game_class": lambda game_id: [keys.games.classes(game_id)],
    "create_game_event": lambda game_id: [keys.games.events(game_id)],
    "create_event_track": lambda event_id: [keys.games.tracks(event_id), keys.games.all],
    "create_news": lambda: [keys.news.all],
    "update_news": lambda article_id: [keys.news.all],
    "delete_news": lambda article_id: [keys.news.all],
    "create_team": _team_change,
    "update_team": _team_change,
    "apply_to_team": lambda team_id, user_id: [
        keys.teams.members(team_id),
        keys.teams.pending_applications(),
        keys.teams.user_status(user_id),
    ],
    "approve_team_member": _team_member_decision,
    "reject_team_member": _team_member_decision,
    "create_category": lambda: [keys.categories.all],
    "register_for_rally": lambda rally_id, user_id: [
        keys.registrations.rally(rally_id),
        keys.registrations.user(user_id),
    ],
    # Standings read results of every championship the rally belongs to.
    "save_rally_results": lambda rally_id: [keys.results.rally(rally_id), keys.championships.all],
    "create_game_vehicle": lambda game_id: [keys.vehicles.lists(), keys.vehicles.for_game(game_id)],
    # Teams embed the vehicle name.
    "update_game_vehicle": lambda vehicle_id: [keys.vehicles.all, keys.teams.all],
    "delete_game_vehicle": lambda vehicle_id: [keys.vehicles.all],
}


def invalidates(mutation: str, **ids: str) -> list[QueryKey]:
    """Key prefixes *mutation* invalidates once it succeeds.

    Usage:
        cache.invalidate_many(invalidates("reject_user", user_id=user.id))
    """
    try:
        rule = INVALIDATIONS[mutation]
    except KeyError:
        raise KeyError(f"No invalidation rule declared for mutation {mutation!r}") from None
    return rule(**ids)
