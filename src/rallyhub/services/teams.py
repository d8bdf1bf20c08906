"""Team service: team rosters, applications and a player's current team."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rallydb.models import Team, TeamMember

from ..api_logging import log_service_call
from ..constants import DEFAULT_TEAM_SIZE
from ..data.base import TeamRepository, UserRepository
from ..data.errors import NotFound, ValidationFailure
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService


@dataclass(frozen=True)
class PlayerTeam:
    team_name: str
    vehicle_name: str | None = None
    class_name: str | None = None


class TeamService(CachedService):
    """Business logic for teams and team applications."""

    def __init__(
        self, repo: TeamRepository, users: UserRepository, cache: QueryCache,
    ) -> None:
        super().__init__(cache)
        self._repo = repo
        self._users = users

    @log_service_call
    async def list_teams(self) -> list[Team]:
        return await self._read(keys.teams.list(), "teams.list", self._repo.list_teams)

    @log_service_call
    async def get_team(self, team_id: str) -> Team:
        return await self._read(
            keys.teams.detail(team_id), "teams.detail",
            lambda: self._repo.get_team(team_id),
        )

    @log_service_call
    async def list_members(self, team_id: str) -> list[TeamMember]:
        return await self._read(
            keys.teams.members(team_id), "teams.members",
            lambda: self._repo.list_members(team_id),
        )

    @log_service_call
    async def list_pending_applications(self) -> list[TeamMember]:
        return await self._read(
            keys.teams.pending_applications(), "teams.pending_applications",
            self._repo.list_pending_applications,
        )

    @log_service_call
    async def get_player_team(self, user_id: str) -> PlayerTeam | None:
        """The team *user_id* is an approved member of, or None."""

        async def load() -> PlayerTeam | None:
            membership = await self._repo.find_membership(user_id)
            if membership is None:
                return None
            try:
                team = await self._repo.get_team(membership.team_id)
            except NotFound:
                return None
            return PlayerTeam(team.team_name, team.vehicle_name, team.class_name)

        return await self._read(keys.teams.player_team(user_id), "teams.player_team", load)

    @log_service_call
    async def has_team(self, user_id: str) -> bool:
        async def load() -> bool:
            return (await self._users.get_user(user_id)).has_team

        return await self._read(keys.teams.user_status(user_id), "teams.user_status", load)

    @log_service_call
    async def create_team(self, payload: dict[str, Any]) -> Team:
        team = await self._repo.create_team({"max_members_count": DEFAULT_TEAM_SIZE, **payload})
        self._invalidate("create_team", team_id=team.id)
        return team

    @log_service_call
    async def update_team(self, team_id: str, changes: dict[str, Any]) -> Team:
        team = await self._repo.update_team(team_id, changes)
        self._invalidate("update_team", team_id=team_id)
        return team

    @log_service_call
    async def apply_to_team(self, team_id: str, user_id: str) -> TeamMember:
        team = await self.get_team(team_id)
        if team.is_full:
            raise ValidationFailure(f"Team {team.team_name} is full")
        application = await self._repo.apply(team_id, user_id)
        self._invalidate("apply_to_team", team_id=team_id, user_id=user_id)
        return application

    @log_service_call
    async def approve_member(self, member: TeamMember) -> TeamMember:
        updated = await self._repo.set_member_status(member.id, "approved")
        self._invalidate("approve_team_member", team_id=member.team_id, user_id=member.user_id)
        return updated

    @log_service_call
    async def reject_member(self, member: TeamMember) -> TeamMember:
        updated = await self._repo.set_member_status(member.id, "rejected")
        self._invalidate("reject_team_member", team_id=member.team_id, user_id=member.user_id)
        return updated
