"""Abstract per-entity repositories for rally data access.

Every method issues one logical backend request. Failures surface as
``DataError`` subclasses; lookups where "nothing there" is a valid answer
return None instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from rallydb.models import (
    Championship,
    ChampionshipRally,
    EventTrack,
    Game,
    GameClass,
    GameEvent,
    GameVehicle,
    NewsArticle,
    PasswordReset,
    ProductCategory,
    Rally,
    RallyRegistration,
    RallyResult,
    RallyResultsStatus,
    Team,
    TeamMember,
    User,
)
from rallydb.models.championship import ChampionshipStatus
from rallydb.models.rally import RallyStatus
from rallydb.models.team import MemberStatus
from rallydb.models.user import UserStatus


class UserRepository(ABC):
    @abstractmethod
    async def list_users(
        self, status: UserStatus | None = None, *, columns: str = "*",
    ) -> list[User]:
        """Users newest first; *columns* narrows the select for summary views."""

    @abstractmethod
    async def list_pending_users(self) -> list[User]: ...

    @abstractmethod
    async def get_user(self, user_id: str) -> User: ...

    @abstractmethod
    async def set_status(self, user_id: str, status: UserStatus, admin_approved: bool) -> User: ...

    @abstractmethod
    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User: ...

    @abstractmethod
    async def delete_user(self, user_id: str) -> None: ...


class RallyRepository(ABC):
    @abstractmethod
    async def list_rallies(
        self, status: RallyStatus | None = None, game_id: str | None = None,
    ) -> list[Rally]: ...

    @abstractmethod
    async def list_upcoming(self, limit: int, now: datetime) -> list[Rally]: ...

    @abstractmethod
    async def list_featured(self, limit: int) -> list[Rally]: ...

    @abstractmethod
    async def get_rally(self, rally_id: str) -> Rally: ...

    @abstractmethod
    async def create_rally(self, payload: dict[str, Any]) -> Rally: ...

    @abstractmethod
    async def update_rally(self, rally_id: str, changes: dict[str, Any]) -> Rally: ...

    @abstractmethod
    async def delete_rally(self, rally_id: str) -> None: ...


class ChampionshipRepository(ABC):
    @abstractmethod
    async def list_championships(
        self, status: ChampionshipStatus | None = None,
    ) -> list[Championship]: ...

    @abstractmethod
    async def get_championship(self, championship_id: str) -> Championship: ...

    @abstractmethod
    async def create_championship(self, payload: dict[str, Any]) -> Championship: ...

    @abstractmethod
    async def update_championship(
        self, championship_id: str, changes: dict[str, Any],
    ) -> Championship: ...

    @abstractmethod
    async def list_rounds(self, championship_id: str) -> list[ChampionshipRally]: ...

    @abstractmethod
    async def add_round(
        self, championship_id: str, rally_id: str, round_number: int,
    ) -> ChampionshipRally: ...

    @abstractmethod
    async def remove_round(self, championship_id: str, rally_id: str) -> None: ...

    @abstractmethod
    async def list_results(self, rally_ids: list[str]) -> list[RallyResult]: ...


class TeamRepository(ABC):
    @abstractmethod
    async def list_teams(self) -> list[Team]: ...

    @abstractmethod
    async def get_team(self, team_id: str) -> Team: ...

    @abstractmethod
    async def create_team(self, payload: dict[str, Any]) -> Team: ...

    @abstractmethod
    async def update_team(self, team_id: str, changes: dict[str, Any]) -> Team: ...

    @abstractmethod
    async def list_members(self, team_id: str) -> list[TeamMember]: ...

    @abstractmethod
    async def list_pending_applications(self) -> list[TeamMember]: ...

    @abstractmethod
    async def find_membership(self, user_id: str) -> TeamMember | None: ...

    @abstractmethod
    async def apply(self, team_id: str, user_id: str) -> TeamMember: ...

    @abstractmethod
    async def set_member_status(self, member_id: str, status: MemberStatus) -> TeamMember: ...


class GameRepository(ABC):
    @abstractmethod
    async def list_games(self) -> list[Game]: ...

    @abstractmethod
    async def list_classes(self, game_id: str) -> list[GameClass]: ...

    @abstractmethod
    async def list_events(self, game_id: str) -> list[GameEvent]: ...

    @abstractmethod
    async def list_tracks(self, event_id: str) -> list[EventTrack]: ...

    @abstractmethod
    async def create_game(self, payload: dict[str, Any]) -> Game: ...

    @abstractmethod
    async def create_class(self, payload: dict[str, Any]) -> GameClass: ...

    @abstractmethod
    async def create_event(self, payload: dict[str, Any]) -> GameEvent: ...

    @abstractmethod
    async def create_track(self, payload: dict[str, Any]) -> EventTrack: ...

    @abstractmethod
    async def delete_game(self, game_id: str) -> None: ...


class NewsRepository(ABC):
    @abstractmethod
    async def list_published(self, limit: int) -> list[NewsArticle]: ...

    @abstractmethod
    async def get_published(self, article_id: str) -> NewsArticle | None: ...

    @abstractmethod
    async def list_all(self) -> list[NewsArticle]: ...

    @abstractmethod
    async def create_article(self, payload: dict[str, Any]) -> NewsArticle: ...

    @abstractmethod
    async def update_article(self, article_id: str, changes: dict[str, Any]) -> NewsArticle: ...

    @abstractmethod
    async def delete_article(self, article_id: str) -> None: ...


class CategoryRepository(ABC):
    @abstractmethod
    async def list_categories(self) -> list[ProductCategory]: ...

    @abstractmethod
    async def create_category(self, payload: dict[str, Any]) -> ProductCategory: ...


class PasswordResetRepository(ABC):
    @abstractmethod
    async def find_valid(self, token: str, now: datetime) -> PasswordReset | None: ...


class RegistrationRepository(ABC):
    @abstractmethod
    async def list_for_rally(self, rally_id: str) -> list[RallyRegistration]: ...

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[RallyRegistration]: ...

    @abstractmethod
    async def list_rally_classes(self, rally_id: str) -> list[GameClass]:
        """Classes open for entry in *rally_id*."""

    @abstractmethod
    async def create_registration(self, payload: dict[str, Any]) -> RallyRegistration: ...


class ResultRepository(ABC):
    @abstractmethod
    async def list_for_rally(self, rally_id: str) -> list[RallyResult]: ...

    @abstractmethod
    async def find_result(
        self, rally_id: str, *, user_id: str | None = None, participant_name: str | None = None,
    ) -> RallyResult | None:
        """A registered user's row by *user_id*, otherwise a manual row by *participant_name*."""

    @abstractmethod
    async def insert_result(self, payload: dict[str, Any]) -> RallyResult: ...

    @abstractmethod
    async def update_result(self, result_id: str, changes: dict[str, Any]) -> RallyResult: ...

    @abstractmethod
    async def mark_completed(self, rally_id: str, completed_by: str | None) -> RallyResultsStatus: ...


class VehicleRepository(ABC):
    @abstractmethod
    async def list_vehicles(self, game_id: str | None = None) -> list[GameVehicle]: ...

    @abstractmethod
    async def find_by_name(self, game_id: str, vehicle_name: str) -> GameVehicle | None: ...

    @abstractmethod
    async def create_vehicle(self, payload: dict[str, Any]) -> GameVehicle: ...

    @abstractmethod
    async def update_vehicle(self, vehicle_id: str, changes: dict[str, Any]) -> GameVehicle: ...

    @abstractmethod
    async def is_in_use(self, vehicle_id: str) -> bool:
        """True while some team drives *vehicle_id*."""

    @abstractmethod
    async def delete_vehicle(self, vehicle_id: str) -> None: ...
