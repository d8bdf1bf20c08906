"""Results entry: writing a rally's ``rally_results`` rows after it is driven."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from rallydb.models import RallyResult

from ..api_logging import log_service_call
from ..data._backend import utc_now_iso
from ..data.base import ResultRepository
from ..data.errors import ValidationFailure
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultEntry:
    """One participant's result as typed in by an admin.

    Registered participants are identified by ``user_id`` and take their
    class from their registration. Manual participants carry a
    ``participant_name`` and their own ``class_name``.
    """

    user_id: str | None = None
    participant_name: str | None = None
    class_name: str | None = None
    overall_position: int | None = None
    total_points: float | None = None
    extra_points: float | None = None

    @property
    def has_result(self) -> bool:
        return self.overall_position is not None or self.total_points is not None

    @property
    def is_manual(self) -> bool:
        return self.user_id is None


class ResultService(CachedService):
    """Business logic for entering and reading a rally's results."""

    def __init__(self, repo: ResultRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_results(self, rally_id: str) -> list[RallyResult]:
        return await self._read(
            keys.results.rally(rally_id), "results.rally",
            lambda: self._repo.list_for_rally(rally_id),
        )

    @log_service_call
    async def save_results(
        self,
        rally_id: str,
        entries: Iterable[ResultEntry],
        entered_by: str | None = None,
    ) -> int:
        """Insert or update one row per entry that has a position or points.

        Entries with neither are skipped. Once every row is written the rally
        is flagged as having complete results. Returns the number of rows saved.
        """
        to_save = [e for e in entries if e.has_result]
        if not to_save:
            raise ValidationFailure("No results to save")
        for entry in to_save:
            if entry.is_manual and not (entry.participant_name or "").strip():
                raise ValidationFailure("A manual result needs a participant name")

        saved = 0
        try:
            for entry in to_save:
                await self._save_one(rally_id, entry, entered_by)
                saved += 1
            await self._repo.mark_completed(rally_id, entered_by)
        finally:
            if saved:
                self._invalidate("save_rally_results", rally_id=rally_id)
        logger.info("saved %d results for rally %s", saved, rally_id)
        return saved

    async def _save_one(self, rally_id: str, entry: ResultEntry, entered_by: str | None) -> RallyResult:
        name = (entry.participant_name or "").strip() or None
        if entry.is_manual:
            existing = await self._repo.find_result(rally_id, participant_name=name)
        else:
            existing = await self._repo.find_result(rally_id, user_id=entry.user_id)

        changes: dict[str, Any] = {
            "overall_position": entry.overall_position,
            "total_points": entry.total_points,
            "updated_at": utc_now_iso(),
        }
        if entry.extra_points is not None:
            changes["extra_points"] = entry.extra_points
        if entry.is_manual:
            changes["class_name"] = entry.class_name

        if existing is not None and existing.id is not None:
            return await self._repo.update_result(existing.id, changes)
        return await self._repo.insert_result({
            **changes,
            "rally_id": rally_id,
            "user_id": entry.user_id,
            "participant_name": name if entry.is_manual else None,
            "class_name": entry.class_name if entry.is_manual else None,
            "results_entered_by": entered_by,
        })
