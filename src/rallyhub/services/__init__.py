"""Service layer: cached reads and invalidating mutations per feature."""

from __future__ import annotations

from dataclasses import dataclass

from ..data import Repositories
from ..query.cache import QueryCache
from .categories import CategoryService
from .championships import ChampionshipService
from .games import GameService
from .news import NewsService
from .rallies import (
    RallyService,
    RallyStatusChange,
    RallyStatusCheck,
    StatusRefreshReport,
    derive_rally_status,
)
from .registrations import RegistrationService, registration_open
from .results import ResultEntry, ResultService
from .scoring import (
    ChampionshipParticipantResult,
    ChampionshipResultRow,
    ChampionshipStandings,
    RallyScoreLine,
    aggregate_championship,
    build_result_rows,
    compute_standings,
)
from .teams import PlayerTeam, TeamService
from .users import UserService, UserStats, compute_user_stats
from .vehicles import VehicleService


@dataclass(frozen=True)
class Services:
    users: UserService
    rallies: RallyService
    championships: ChampionshipService
    teams: TeamService
    games: GameService
    news: NewsService
    categories: CategoryService
    registrations: RegistrationService
    results: ResultService
    vehicles: VehicleService


def build_services(repos: Repositories, cache: QueryCache) -> Services:
    """Wire one service per feature over shared repositories and cache."""
    return Services(
        users=UserService(repos.users, cache),
        rallies=RallyService(repos.rallies, cache),
        championships=ChampionshipService(repos.championships, cache),
        teams=TeamService(repos.teams, repos.users, cache),
        games=GameService(repos.games, cache),
        news=NewsService(repos.news, cache),
        categories=CategoryService(repos.categories, cache),
        registrations=RegistrationService(repos.registrations, repos.rallies, cache),
        results=ResultService(repos.results, cache),
        vehicles=VehicleService(repos.vehicles, cache),
    )


__all__ = [
    "CategoryService",
    "ChampionshipParticipantResult",
    "ChampionshipResultRow",
    "ChampionshipService",
    "ChampionshipStandings",
    "GameService",
    "NewsService",
    "PlayerTeam",
    "RallyScoreLine",
    "RallyService",
    "RallyStatusChange",
    "RallyStatusCheck",
    "RegistrationService",
    "ResultEntry",
    "ResultService",
    "Services",
    "StatusRefreshReport",
    "TeamService",
    "UserService",
    "UserStats",
    "VehicleService",
    "aggregate_championship",
    "build_result_rows",
    "build_services",
    "compute_standings",
    "compute_user_stats",
    "derive_rally_status",
    "registration_open",
]
