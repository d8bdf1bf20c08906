"""Backend repository for teams and team memberships."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import Team, TeamMember
from rallydb.models.team import MemberStatus

from ..api_logging import log_api_call
from ..constants import TEAM_COLUMNS, TEAM_MEMBER_COLUMNS
from ._backend import BackendRepository, first_or_not_found
from .base import TeamRepository
from .errors import translate_error


class BackendTeamRepository(BackendRepository, TeamRepository):

    @log_api_call
    async def list_teams(self) -> list[Team]:
        try:
            return await self._db.select(
                "teams", Team, columns=TEAM_COLUMNS, order=Order("team_name"),
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch teams") from exc

    @log_api_call
    async def get_team(self, team_id: str) -> Team:
        try:
            return await self._db.select_one("teams", Team, columns=TEAM_COLUMNS, id=team_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch team {team_id}") from exc

    @log_api_call
    async def create_team(self, payload: dict[str, Any]) -> Team:
        try:
            return await self._db.insert("teams", Team, payload, columns=TEAM_COLUMNS)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create team") from exc

    @log_api_call
    async def update_team(self, team_id: str, changes: dict[str, Any]) -> Team:
        try:
            rows = await self._db.update("teams", Team, changes, columns=TEAM_COLUMNS, id=team_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update team {team_id}") from exc
        return first_or_not_found(rows, f"Team {team_id}")

    @log_api_call
    async def list_members(self, team_id: str) -> list[TeamMember]:
        try:
            return await self._db.select(
                "team_members", TeamMember,
                columns=TEAM_MEMBER_COLUMNS,
                # role enum order; descending lists the manager first
                order=Order("role", ascending=False),
                team_id=team_id,
                status="approved",
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch members of team {team_id}") from exc

    @log_api_call
    async def list_pending_applications(self) -> list[TeamMember]:
        try:
            return await self._db.select(
                "team_members", TeamMember,
                columns=TEAM_MEMBER_COLUMNS,
                order=Order("applied_at", ascending=False),
                status="pending",
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch pending team applications") from exc

    @log_api_call
    async def find_membership(self, user_id: str) -> TeamMember | None:
        try:
            rows = await self._db.select(
                "team_members", TeamMember, limit=1, user_id=user_id, status="approved",
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch team membership of {user_id}") from exc
        return rows[0] if rows else None

    @log_api_call
    async def apply(self, team_id: str, user_id: str) -> TeamMember:
        payload = {"team_id": team_id, "user_id": user_id, "role": "member", "status": "pending"}
        try:
            return await self._db.insert("team_members", TeamMember, payload)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to apply to team {team_id}") from exc

    @log_api_call
    async def set_member_status(self, member_id: str, status: MemberStatus) -> TeamMember:
        try:
            rows = await self._db.update("team_members", TeamMember, {"status": status}, id=member_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to set status of team member {member_id}") from exc
        return first_or_not_found(rows, f"Team member {member_id}")
