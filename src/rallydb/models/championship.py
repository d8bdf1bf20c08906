"""Championship, championship round, and rally result models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import to_one

ChampionshipStatus = Literal["ongoing", "completed"]


class Championship(BaseModel):
    """Season grouping of rallies."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    season_year: int | None = None
    game_id: str | None = None
    status: ChampionshipStatus = "ongoing"
    is_active: bool = True
    created_at: datetime | None = None


class ChampionshipRally(BaseModel):
    """A rally placed in a championship as round ``round_number``."""

    model_config = ConfigDict(frozen=True)

    championship_id: str
    rally_id: str
    round_number: int
    is_active: bool = True
    rally_name: str | None = None
    competition_date: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_rally(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "rallies" not in data:
            return data
        data = dict(data)
        rally = to_one(data.pop("rallies"))
        if rally is not None:
            data.setdefault("rally_name", rally.get("name"))
            data.setdefault("competition_date", rally.get("competition_date"))
        return data


class RallyResult(BaseModel):
    """Row of ``rally_results``: one participant's score in one rally."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    rally_id: str
    participant_name: str | None = None
    user_id: str | None = None
    manual_participant_id: str | None = None
    class_name: str | None = None
    total_points: float = 0
    extra_points: float = 0
    class_position: int | None = None
    overall_position: int | None = None
    # Looked up for registered users: ``users.player_name`` and the class of
    # their ``rally_registrations`` row.
    player_name: str | None = None
    registered_class: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _null_points_to_zero(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("total_points", "extra_points"):
            if data.get(key) is None:
                data[key] = 0
        return data


class RallyResultsStatus(BaseModel):
    """Row of ``rally_results_status``: whether a rally's results are entered."""

    model_config = ConfigDict(frozen=True)

    rally_id: str
    results_completed: bool = False
    completed_by: str | None = None
    completed_at: datetime | None = None
    results_needed_since: datetime | None = None
