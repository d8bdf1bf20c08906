"""Backend repository for championships, their rounds, and rally results."""

from __future__ import annotations

from typing import Any

from rallydb import Filter, Order, RallyDBError
from rallydb.models import Championship, ChampionshipRally, RallyRegistration, RallyResult, User
from rallydb.models.championship import ChampionshipStatus

from ..api_logging import log_api_call
from ..constants import CHAMPIONSHIP_RALLY_COLUMNS, RALLY_RESULT_COLUMNS, REGISTRATION_CLASS_COLUMNS
from ._backend import BackendRepository, first_or_not_found
from .base import ChampionshipRepository
from .errors import translate_error


class BackendChampionshipRepository(BackendRepository, ChampionshipRepository):

    @log_api_call
    async def list_championships(
        self, status: ChampionshipStatus | None = None,
    ) -> list[Championship]:
        try:
            return await self._db.select(
                "championships", Championship,
                order=Order("created_at", ascending=False),
                status=status,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch championships") from exc

    @log_api_call
    async def get_championship(self, championship_id: str) -> Championship:
        try:
            return await self._db.select_one("championships", Championship, id=championship_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch championship {championship_id}") from exc

    @log_api_call
    async def create_championship(self, payload: dict[str, Any]) -> Championship:
        try:
            return await self._db.insert("championships", Championship, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create championship") from exc

    @log_api_call
    async def update_championship(
        self, championship_id: str, changes: dict[str, Any],
    ) -> Championship:
        try:
            rows = await self._db.update("championships", Championship, changes, id=championship_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update championship {championship_id}") from exc
        return first_or_not_found(rows, f"Championship {championship_id}")

    @log_api_call
    async def list_rounds(self, championship_id: str) -> list[ChampionshipRally]:
        try:
            return await self._db.select(
                "championship_rallies", ChampionshipRally,
                columns=CHAMPIONSHIP_RALLY_COLUMNS,
                order=Order("round_number"),
                championship_id=championship_id,
                is_active=True,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch rounds of {championship_id}") from exc

    @log_api_call
    async def add_round(
        self, championship_id: str, rally_id: str, round_number: int,
    ) -> ChampionshipRally:
        payload = {
            "championship_id": championship_id,
            "rally_id": rally_id,
            "round_number": round_number,
            "is_active": True,
        }
        try:
            return await self._db.insert("championship_rallies", ChampionshipRally, payload)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to add rally {rally_id} to {championship_id}") from exc

    @log_api_call
    async def remove_round(self, championship_id: str, rally_id: str) -> None:
        try:
            await self._db.delete(
                "championship_rallies", championship_id=championship_id, rally_id=rally_id,
            )
        except RallyDBError as exc:
            raise translate_error(
                exc, f"Failed to remove rally {rally_id} from {championship_id}",
            ) from exc

    @log_api_call
    async def list_results(self, rally_ids: list[str]) -> list[RallyResult]:
        """Results of *rally_ids*, with names and classes looked up for nameless registered rows."""
        if not rally_ids:
            return []
        try:
            results = await self._db.select(
                "rally_results", RallyResult,
                columns=RALLY_RESULT_COLUMNS,
                rally_id=Filter(in_=tuple(rally_ids)),
            )
            return await self._with_registered_names(results, rally_ids)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch rally results") from exc

    async def _with_registered_names(
        self, results: list[RallyResult], rally_ids: list[str],
    ) -> list[RallyResult]:
        user_ids = sorted({
            r.user_id for r in results
            if r.user_id and not (r.participant_name or "").strip()
        })
        if not user_ids:
            return results
        users = await self._db.select(
            "users", User, columns="id,player_name", id=Filter(in_=tuple(user_ids)),
        )
        registrations = await self._db.select(
            "rally_registrations", RallyRegistration,
            columns=REGISTRATION_CLASS_COLUMNS,
            rally_id=Filter(in_=tuple(rally_ids)),
            user_id=Filter(in_=tuple(user_ids)),
        )
        player_names = {u.id: u.player_name for u in users}
        classes = {(reg.user_id, reg.rally_id): reg.class_name for reg in registrations}
        wanted = set(user_ids)
        return [
            r.model_copy(update={
                "player_name": player_names.get(r.user_id),
                "registered_class": classes.get((r.user_id, r.rally_id)),
            })
            if r.user_id in wanted else r
            for r in results
        ]
