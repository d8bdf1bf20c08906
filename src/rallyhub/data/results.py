"""Backend repository for writing ``rally_results`` and their completion flag."""

from __future__ import annotations

from typing import Any

from rallydb import Filter, Order, RallyDBError
from rallydb.models import RallyResult, RallyResultsStatus

from ..api_logging import log_api_call
from ..constants import RALLY_RESULT_COLUMNS
from ._backend import BackendRepository, first_or_not_found, utc_now_iso
from .base import ResultRepository
from .errors import translate_error


class BackendResultRepository(BackendRepository, ResultRepository):

    @log_api_call
    async def list_for_rally(self, rally_id: str) -> list[RallyResult]:
        try:
            return await self._db.select(
                "rally_results", RallyResult,
                columns=RALLY_RESULT_COLUMNS,
                order=Order("overall_position"),
                rally_id=rally_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch results of rally {rally_id}") from exc

    @log_api_call
    async def find_result(
        self, rally_id: str, *, user_id: str | None = None, participant_name: str | None = None,
    ) -> RallyResult | None:
        if user_id is not None:
            filters: dict[str, Any] = {"user_id": user_id}
        elif participant_name is not None:
            filters = {"participant_name": participant_name, "user_id": Filter(is_null=True)}
        else:
            raise ValueError("find_result() needs a user_id or a participant_name")
        try:
            rows = await self._db.select(
                "rally_results", RallyResult,
                columns=RALLY_RESULT_COLUMNS, limit=1, rally_id=rally_id, **filters,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to look up result in rally {rally_id}") from exc
        return rows[0] if rows else None

    @log_api_call
    async def insert_result(self, payload: dict[str, Any]) -> RallyResult:
        try:
            return await self._db.insert(
                "rally_results", RallyResult, payload, columns=RALLY_RESULT_COLUMNS,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to save rally result") from exc

    @log_api_call
    async def update_result(self, result_id: str, changes: dict[str, Any]) -> RallyResult:
        try:
            rows = await self._db.update(
                "rally_results", RallyResult, changes, columns=RALLY_RESULT_COLUMNS, id=result_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update rally result {result_id}") from exc
        return first_or_not_found(rows, f"Rally result {result_id}")

    @log_api_call
    async def mark_completed(self, rally_id: str, completed_by: str | None) -> RallyResultsStatus:
        now = utc_now_iso()
        payload = {
            "rally_id": rally_id,
            "results_completed": True,
            "completed_by": completed_by,
            "completed_at": now,
            "updated_at": now,
        }
        try:
            return await self._db.upsert(
                "rally_results_status", RallyResultsStatus, payload, on_conflict="rally_id",
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to mark results of rally {rally_id} complete") from exc
