"""Game vehicle catalog model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import pop_related


class GameVehicle(BaseModel):
    """Row of ``game_vehicles``; ``game_name`` comes from the ``game`` join."""

    model_config = ConfigDict(frozen=True)

    id: str
    vehicle_name: str
    game_id: str
    game_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_game(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "game" not in data:
            return data
        data = dict(data)
        data["game_name"] = pop_related(data, "game", "name")
        return data
