"""Game catalog models: games, classes, events and their tracks."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Game(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    is_active: bool = True


class GameClass(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    game_id: str
    name: str


class GameEvent(BaseModel):
    """A location/country of a game that rallies are built from."""

    model_config = ConfigDict(frozen=True)

    id: str
    game_id: str
    name: str
    country: str | None = None


class EventTrack(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    event_id: str
    name: str
    length_km: float | None = None
