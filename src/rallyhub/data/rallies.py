"""Backend repository for rallies and their events."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rallydb import Filter, Order, RallyDBError
from rallydb.models import Rally
from rallydb.models.rally import RallyStatus

from ..api_logging import log_api_call
from ..constants import RALLY_DETAIL_COLUMNS
from ._backend import BackendRepository, first_or_not_found, utc_now_iso
from .base import RallyRepository
from .errors import translate_error

_BY_DATE = Order("competition_date")


class BackendRallyRepository(BackendRepository, RallyRepository):

    @log_api_call
    async def list_rallies(
        self, status: RallyStatus | None = None, game_id: str | None = None,
    ) -> list[Rally]:
        try:
            return await self._db.select(
                "rallies", Rally,
                columns="*,games(name)",
                order=_BY_DATE,
                is_active=True,
                status=status,
                game_id=game_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch rallies") from exc

    @log_api_call
    async def list_upcoming(self, limit: int, now: datetime) -> list[Rally]:
        try:
            return await self._db.select(
                "rallies", Rally,
                columns="*,games(name)",
                order=_BY_DATE,
                limit=limit,
                is_active=True,
                status="upcoming",
                competition_date=Filter(gte=now),
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch upcoming rallies") from exc

    @log_api_call
    async def list_featured(self, limit: int) -> list[Rally]:
        try:
            return await self._db.select(
                "rallies", Rally,
                columns="*,games(name)",
                order=_BY_DATE,
                limit=limit,
                is_active=True,
                is_featured=True,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch featured rallies") from exc

    @log_api_call
    async def get_rally(self, rally_id: str) -> Rally:
        try:
            return await self._db.select_one(
                "rallies", Rally, columns=RALLY_DETAIL_COLUMNS, id=rally_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch rally {rally_id}") from exc

    @log_api_call
    async def create_rally(self, payload: dict[str, Any]) -> Rally:
        try:
            return await self._db.insert("rallies", Rally, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create rally") from exc

    @log_api_call
    async def update_rally(self, rally_id: str, changes: dict[str, Any]) -> Rally:
        payload = {**changes, "updated_at": utc_now_iso()}
        try:
            rows = await self._db.update("rallies", Rally, payload, id=rally_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update rally {rally_id}") from exc
        return first_or_not_found(rows, f"Rally {rally_id}")

    @log_api_call
    async def delete_rally(self, rally_id: str) -> None:
        try:
            await self._db.delete("rallies", id=rally_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to delete rally {rally_id}") from exc
