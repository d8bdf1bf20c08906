"""Data layer: per-entity repositories and the backend factory."""

from __future__ import annotations

from dataclasses import dataclass

from rallydb import AsyncRallyDBClient

from .base import (
    CategoryRepository,
    ChampionshipRepository,
    GameRepository,
    NewsRepository,
    PasswordResetRepository,
    RallyRepository,
    RegistrationRepository,
    ResultRepository,
    TeamRepository,
    UserRepository,
    VehicleRepository,
)
from .errors import (
    DataError,
    NotFound,
    TransportFailure,
    Unauthorized,
    UnknownDataError,
    ValidationFailure,
    translate_error,
    user_message,
)


@dataclass(frozen=True)
class Repositories:
    """One repository per entity, sharing a backend client."""

    users: UserRepository
    rallies: RallyRepository
    championships: ChampionshipRepository
    teams: TeamRepository
    games: GameRepository
    news: NewsRepository
    categories: CategoryRepository
    password_resets: PasswordResetRepository
    registrations: RegistrationRepository
    results: ResultRepository
    vehicles: VehicleRepository


def get_repositories(client: AsyncRallyDBClient) -> Repositories:
    """Return the backend-backed repositories for *client*."""
    from .categories import BackendCategoryRepository
    from .championships import BackendChampionshipRepository
    from .games import BackendGameRepository
    from .news import BackendNewsRepository
    from .password_resets import BackendPasswordResetRepository
    from .rallies import BackendRallyRepository
    from .registrations import BackendRegistrationRepository
    from .results import BackendResultRepository
    from .teams import BackendTeamRepository
    from .users import BackendUserRepository
    from .vehicles import BackendVehicleRepository

    return Repositories(
        users=BackendUserRepository(client),
        rallies=BackendRallyRepository(client),
        championships=BackendChampionshipRepository(client),
        teams=BackendTeamRepository(client),
        games=BackendGameRepository(client),
        news=BackendNewsRepository(client),
        categories=BackendCategoryRepository(client),
        password_resets=BackendPasswordResetRepository(client),
        registrations=BackendRegistrationRepository(client),
        results=BackendResultRepository(client),
        vehicles=BackendVehicleRepository(client),
    )


__all__ = [
    "CategoryRepository",
    "ChampionshipRepository",
    "DataError",
    "GameRepository",
    "NewsRepository",
    "NotFound",
    "PasswordResetRepository",
    "RallyRepository",
    "RegistrationRepository",
    "Repositories",
    "ResultRepository",
    "TeamRepository",
    "TransportFailure",
    "Unauthorized",
    "UnknownDataError",
    "UserRepository",
    "ValidationFailure",
    "VehicleRepository",
    "get_repositories",
    "translate_error",
    "user_message",
]
