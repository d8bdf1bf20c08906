"""Game vehicle catalog service."""

from __future__ import annotations

from rallydb.models import GameVehicle

from ..api_logging import log_service_call
from ..data.base import VehicleRepository
from ..data.errors import ValidationFailure
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService


def _clean_name(vehicle_name: str) -> str:
    name = vehicle_name.strip()
    if not name:
        raise ValidationFailure("Vehicle name is required")
    return name


class VehicleService(CachedService):

    def __init__(self, repo: VehicleRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_vehicles(self) -> list[GameVehicle]:
        return await self._read(keys.vehicles.list(), "vehicles.list", self._repo.list_vehicles)

    @log_service_call
    async def list_for_game(self, game_id: str) -> list[GameVehicle]:
        return await self._read(
            keys.vehicles.for_game(game_id), "vehicles.game",
            lambda: self._repo.list_vehicles(game_id),
        )

    @log_service_call
    async def create_vehicle(self, game_id: str, vehicle_name: str) -> GameVehicle:
        name = _clean_name(vehicle_name)
        if await self._repo.find_by_name(game_id, name) is not None:
            raise ValidationFailure(f"A vehicle named {name} already exists in this game")
        vehicle = await self._repo.create_vehicle({"game_id": game_id, "vehicle_name": name})
        self._invalidate("create_game_vehicle", game_id=game_id)
        return vehicle

    @log_service_call
    async def rename_vehicle(self, vehicle_id: str, vehicle_name: str) -> GameVehicle:
        vehicle = await self._repo.update_vehicle(vehicle_id, {"vehicle_name": _clean_name(vehicle_name)})
        self._invalidate("update_game_vehicle", vehicle_id=vehicle_id)
        return vehicle

    @log_service_call
    async def delete_vehicle(self, vehicle_id: str) -> None:
        if await self._repo.is_in_use(vehicle_id):
            raise ValidationFailure("Teams still use this vehicle; remove it from them first")
        await self._repo.delete_vehicle(vehicle_id)
        self._invalidate("delete_game_vehicle", vehicle_id=vehicle_id)
