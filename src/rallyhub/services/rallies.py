"""Rally scheduling service, including the time-based status refresh."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from rallydb.models import Rally
from rallydb.models.rally import RallyStatus

from ..api_logging import log_service_call
from ..constants import RALLY_COMPLETION_GRACE
from ..data.base import RallyRepository
from ..data.errors import DataError, user_message
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


def derive_rally_status(rally: Rally, now: datetime) -> RallyStatus:
    """Status implied by the clock: running from the start, done an hour later."""
    start = rally.competition_date
    if start.tzinfo is None:
        start = start.replace(tzinfo=UTC)
    if now > start + RALLY_COMPLETION_GRACE:
        return "completed"
    if now > start:
        return "active"
    return "upcoming"


@dataclass(frozen=True)
class RallyStatusChange:
    rally_id: str
    name: str
    old_status: RallyStatus
    new_status: RallyStatus
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class StatusRefreshReport:
    total: int
    changes: list[RallyStatusChange] = field(default_factory=list)
    checked_at: datetime | None = None

    @property
    def updated(self) -> int:
        return sum(1 for c in self.changes if c.succeeded)


@dataclass(frozen=True)
class RallyStatusCheck:
    """A rally's stored status next to the one its date implies."""

    rally_id: str
    name: str
    current_status: RallyStatus
    expected_status: RallyStatus
    competition_date: datetime
    registration_deadline: datetime | None = None

    @property
    def needs_update(self) -> bool:
        return self.current_status != self.expected_status


class RallyService(CachedService):
    """Business logic for rally listings and rally administration."""

    def __init__(
        self,
        repo: RallyRepository,
        cache: QueryCache,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(cache)
        self._repo = repo
        self._clock = clock

    @log_service_call
    async def list_rallies(
        self, status: RallyStatus | None = None, game_id: str | None = None,
    ) -> list[Rally]:
        filters = {k: v for k, v in (("status", status), ("game_id", game_id)) if v is not None}
        return await self._read(
            keys.rallies.list(filters), "rallies.list",
            lambda: self._repo.list_rallies(status=status, game_id=game_id),
        )

    @log_service_call
    async def get_rally(self, rally_id: str) -> Rally:
        return await self._read(
            keys.rallies.detail(rally_id), "rallies.detail",
            lambda: self._repo.get_rally(rally_id),
        )

    @log_service_call
    async def list_upcoming(self, limit: int = 5) -> list[Rally]:
        return await self._read(
            keys.rallies.upcoming(limit), "rallies.upcoming",
            lambda: self._repo.list_upcoming(limit, self._clock()),
        )

    @log_service_call
    async def list_featured(self, limit: int = 3) -> list[Rally]:
        return await self._read(
            keys.rallies.featured(limit), "rallies.featured",
            lambda: self._repo.list_featured(limit),
        )

    @log_service_call
    async def create_rally(self, payload: dict[str, Any]) -> Rally:
        rally = await self._repo.create_rally(payload)
        self._invalidate("create_rally")
        return rally

    @log_service_call
    async def update_rally(self, rally_id: str, changes: dict[str, Any]) -> Rally:
        rally = await self._repo.update_rally(rally_id, changes)
        self._invalidate("update_rally", rally_id=rally_id)
        return rally

    @log_service_call
    async def delete_rally(self, rally_id: str) -> None:
        await self._repo.delete_rally(rally_id)
        self._invalidate("delete_rally", rally_id=rally_id)
        self._forget(keys.rallies.detail(rally_id))

    @log_service_call
    async def check_statuses(self, limit: int | None = None) -> list[RallyStatusCheck]:
        """Compare stored and date-implied status of active rallies, latest first.

        Nothing is written; ``refresh_statuses`` applies the differences.
        """
        now = self._clock()
        rallies = sorted(
            await self._repo.list_rallies(), key=lambda r: r.competition_date, reverse=True,
        )
        if limit is not None:
            rallies = rallies[:limit]
        return [
            RallyStatusCheck(
                rally_id=rally.id,
                name=rally.name,
                current_status=rally.status,
                expected_status=derive_rally_status(rally, now),
                competition_date=rally.competition_date,
                registration_deadline=rally.registration_deadline,
            )
            for rally in rallies
        ]

    @log_service_call
    async def refresh_statuses(self) -> StatusRefreshReport:
        """Move every active rally to the status its date implies.

        Rallies already in the right status are left alone. A failed update is
        reported on its change line and does not stop the others.
        """
        now = self._clock()
        rallies = await self._repo.list_rallies()
        changes: list[RallyStatusChange] = []
        for rally in rallies:
            new_status = derive_rally_status(rally, now)
            if new_status == rally.status:
                continue
            try:
                await self._repo.update_rally(rally.id, {"status": new_status})
            except DataError as exc:
                logger.error("status update of rally %s failed: %s", rally.id, exc)
                changes.append(RallyStatusChange(
                    rally.id, rally.name, rally.status, new_status, error=user_message(exc),
                ))
                continue
            logger.info("rally %s: %s -> %s", rally.id, rally.status, new_status)
            changes.append(RallyStatusChange(rally.id, rally.name, rally.status, new_status))

        report = StatusRefreshReport(total=len(rallies), changes=changes, checked_at=now)
        if report.updated:
            self._invalidate("refresh_rally_statuses")
        return report
