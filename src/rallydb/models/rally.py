"""Rally models with their events and tracks."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import pop_related, to_many, to_one

RallyStatus = Literal["upcoming", "active", "completed"]


class RallyTrack(BaseModel):
    """Track driven within a rally event."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    length_km: float | None = None


class RallyEvent(BaseModel):
    """One event (country/location) of a rally, in driving order."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    event_order: int = 0
    event_name: str | None = None
    tracks: tuple[RallyTrack, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _flatten_event(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "game_events" not in data:
            return data
        data = dict(data)
        event = to_one(data.pop("game_events"))
        if event is not None:
            data.setdefault("event_name", event.get("name"))
            data.setdefault("tracks", to_many(event.get("event_tracks")))
        return data


class Rally(BaseModel):
    """Row of the ``rallies`` table, optionally with embedded events."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    game_id: str | None = None
    game_name: str | None = None
    competition_date: datetime
    registration_deadline: datetime | None = None
    status: RallyStatus = "upcoming"
    description: str | None = None
    is_active: bool = True
    is_featured: bool = False
    created_by: str | None = None
    created_at: datetime | None = None
    events: tuple[RallyEvent, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _flatten_joins(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "games" in data:
            data["game_name"] = pop_related(data, "games", "name")
        if "rally_events" in data:
            events = to_many(data.pop("rally_events"))
            data["events"] = sorted(events, key=lambda e: e.get("event_order") or 0)
        return data
