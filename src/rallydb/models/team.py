"""Team and team membership models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import pop_related

MemberRole = Literal["manager", "member"]
MemberStatus = Literal["pending", "approved", "rejected"]


class Team(BaseModel):
    """Row of ``teams`` with the vehicle and class names flattened in."""

    model_config = ConfigDict(frozen=True)

    id: str
    team_name: str
    manager_id: str | None = None
    game_id: str | None = None
    class_id: str | None = None
    vehicle_id: str | None = None
    max_members_count: int = 5
    members_count: int = 0
    vehicle_name: str | None = None
    class_name: str | None = None
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_joins(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "vehicle" in data:
            data["vehicle_name"] = pop_related(data, "vehicle", "vehicle_name")
        if "game_class" in data:
            data["class_name"] = pop_related(data, "game_class", "name")
        return data

    @property
    def is_full(self) -> bool:
        return self.members_count >= self.max_members_count

    @property
    def free_slots(self) -> int:
        return max(self.max_members_count - self.members_count, 0)


class TeamMember(BaseModel):
    """Row of ``team_members``; an application until approved."""

    model_config = ConfigDict(frozen=True)

    id: str
    team_id: str
    user_id: str
    role: MemberRole = "member"
    status: MemberStatus = "pending"
    applied_at: datetime | None = None
    user_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_user(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "user" not in data:
            return data
        data = dict(data)
        data["user_name"] = pop_related(data, "user", "name")
        return data
