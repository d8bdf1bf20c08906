"""Championship service: season management, rounds and standings."""

from __future__ import annotations

from typing import Any

from rallydb.models import Championship, ChampionshipRally
from rallydb.models.championship import ChampionshipStatus

from ..api_logging import log_service_call
from ..data.base import ChampionshipRepository
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService
from .scoring import ChampionshipStandings, compute_standings, order_rounds


def next_round_number(rounds: list[ChampionshipRally]) -> int:
    return max((r.round_number for r in rounds), default=0) + 1


class ChampionshipService(CachedService):
    """Business logic for championships and their standings."""

    def __init__(self, repo: ChampionshipRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_championships(
        self, status: ChampionshipStatus | None = None,
    ) -> list[Championship]:
        filters = {"status": status} if status else {}
        return await self._read(
            keys.championships.list(filters), "championships.list",
            lambda: self._repo.list_championships(status),
        )

    @log_service_call
    async def list_public(self) -> list[Championship]:
        """Active championships, newest season first."""

        async def load() -> list[Championship]:
            rows = await self._repo.list_championships()
            active = [c for c in rows if c.is_active]
            active.sort(key=lambda c: c.name)
            active.sort(key=lambda c: c.season_year or 0, reverse=True)
            return active

        return await self._read(keys.championships.public(), "championships.public", load)

    @log_service_call
    async def get_championship(self, championship_id: str) -> Championship:
        return await self._read(
            keys.championships.detail(championship_id), "championships.detail",
            lambda: self._repo.get_championship(championship_id),
        )

    @log_service_call
    async def list_rounds(self, championship_id: str) -> list[ChampionshipRally]:
        return await self._read(
            keys.championships.rallies(championship_id), "championships.rallies",
            lambda: self._repo.list_rounds(championship_id),
        )

    @log_service_call
    async def get_standings(self, championship_id: str) -> ChampionshipStandings:
        """Ranked per-class results across all rounds of the championship."""

        async def load() -> ChampionshipStandings:
            championship = await self._repo.get_championship(championship_id)
            rounds = order_rounds(await self._repo.list_rounds(championship_id))
            results = await self._repo.list_results([r.rally_id for r in rounds])
            return compute_standings(championship, rounds, results)

        return await self._read(
            keys.championships.results(championship_id), "championships.results", load,
        )

    @log_service_call
    async def create_championship(self, payload: dict[str, Any]) -> Championship:
        championship = await self._repo.create_championship(payload)
        self._invalidate("create_championship", championship_id=championship.id)
        return championship

    @log_service_call
    async def set_status(
        self, championship_id: str, status: ChampionshipStatus,
    ) -> Championship:
        championship = await self._repo.update_championship(championship_id, {"status": status})
        self._invalidate("set_championship_status", championship_id=championship_id)
        return championship

    @log_service_call
    async def add_rally(
        self, championship_id: str, rally_id: str, round_number: int | None = None,
    ) -> ChampionshipRally:
        """Add *rally* as a round; without *round_number* it goes last."""
        if round_number is None:
            round_number = next_round_number(await self._repo.list_rounds(championship_id))
        added = await self._repo.add_round(championship_id, rally_id, round_number)
        self._invalidate("add_championship_rally", championship_id=championship_id)
        return added

    @log_service_call
    async def remove_rally(self, championship_id: str, rally_id: str) -> None:
        await self._repo.remove_round(championship_id, rally_id)
        self._invalidate("remove_championship_rally", championship_id=championship_id)
