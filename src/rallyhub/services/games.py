"""Game catalog service: games, classes, events and tracks."""

from __future__ import annotations

from typing import Any

from rallydb.models import EventTrack, Game, GameClass, GameEvent

from ..api_logging import log_service_call
from ..data.base import GameRepository
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService


class GameService(CachedService):

    def __init__(self, repo: GameRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_games(self) -> list[Game]:
        return await self._read(keys.games.list(), "games.list", self._repo.list_games)

    @log_service_call
    async def list_classes(self, game_id: str) -> list[GameClass]:
        return await self._read(
            keys.games.classes(game_id), "games.classes",
            lambda: self._repo.list_classes(game_id),
        )

    @log_service_call
    async def list_events(self, game_id: str) -> list[GameEvent]:
        return await self._read(
            keys.games.events(game_id), "games.events",
            lambda: self._repo.list_events(game_id),
        )

    @log_service_call
    async def list_tracks(self, event_id: str) -> list[EventTrack]:
        return await self._read(
            keys.games.tracks(event_id), "games.tracks",
            lambda: self._repo.list_tracks(event_id),
        )

    @log_service_call
    async def create_game(self, payload: dict[str, Any]) -> Game:
        game = await self._repo.create_game(payload)
        self._invalidate("create_game")
        return game

    @log_service_call
    async def delete_game(self, game_id: str) -> None:
        await self._repo.delete_game(game_id)
        self._invalidate("delete_game", game_id=game_id)

    @log_service_call
    async def create_class(self, game_id: str, name: str) -> GameClass:
        game_class = await self._repo.create_class({"game_id": game_id, "name": name})
        self._invalidate("create_game_class", game_id=game_id)
        return game_class

    @log_service_call
    async def create_event(self, game_id: str, payload: dict[str, Any]) -> GameEvent:
        event = await self._repo.create_event({**payload, "game_id": game_id})
        self._invalidate("create_game_event", game_id=game_id)
        return event

    @log_service_call
    async def create_track(self, event_id: str, payload: dict[str, Any]) -> EventTrack:
        track = await self._repo.create_track({**payload, "event_id": event_id})
        self._invalidate("create_event_track", event_id=event_id)
        return track
