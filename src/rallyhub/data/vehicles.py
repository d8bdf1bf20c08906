"""Backend repository for the ``game_vehicles`` catalog."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import GameVehicle

from ..api_logging import log_api_call
from ..constants import GAME_VEHICLE_COLUMNS
from ._backend import BackendRepository, first_or_not_found, utc_now_iso
from .base import VehicleRepository
from .errors import translate_error

_BY_NAME = Order("vehicle_name")


class BackendVehicleRepository(BackendRepository, VehicleRepository):

    @log_api_call
    async def list_vehicles(self, game_id: str | None = None) -> list[GameVehicle]:
        try:
            return await self._db.select(
                "game_vehicles", GameVehicle,
                columns=GAME_VEHICLE_COLUMNS,
                order=[Order("game_id"), _BY_NAME],
                game_id=game_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch game vehicles") from exc

    @log_api_call
    async def find_by_name(self, game_id: str, vehicle_name: str) -> GameVehicle | None:
        try:
            rows = await self._db.select(
                "game_vehicles", GameVehicle, limit=1, game_id=game_id, vehicle_name=vehicle_name,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to look up vehicle {vehicle_name!r}") from exc
        return rows[0] if rows else None

    @log_api_call
    async def create_vehicle(self, payload: dict[str, Any]) -> GameVehicle:
        try:
            return await self._db.insert(
                "game_vehicles", GameVehicle, payload, columns=GAME_VEHICLE_COLUMNS,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create vehicle") from exc

    @log_api_call
    async def update_vehicle(self, vehicle_id: str, changes: dict[str, Any]) -> GameVehicle:
        try:
            rows = await self._db.update(
                "game_vehicles", GameVehicle, {**changes, "updated_at": utc_now_iso()},
                columns=GAME_VEHICLE_COLUMNS, id=vehicle_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update vehicle {vehicle_id}") from exc
        return first_or_not_found(rows, f"Vehicle {vehicle_id}")

    @log_api_call
    async def is_in_use(self, vehicle_id: str) -> bool:
        try:
            rows = await self._db.select("teams", dict, columns="id", limit=1, vehicle_id=vehicle_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to check teams using vehicle {vehicle_id}") from exc
        return bool(rows)

    @log_api_call
    async def delete_vehicle(self, vehicle_id: str) -> None:
        try:
            await self._db.delete("game_vehicles", id=vehicle_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to delete vehicle {vehicle_id}") from exc
