"""Backend repository for the game catalog."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import EventTrack, Game, GameClass, GameEvent

from ..api_logging import log_api_call
from ._backend import BackendRepository
from .base import GameRepository
from .errors import translate_error

_BY_NAME = Order("name")


class BackendGameRepository(BackendRepository, GameRepository):

    @log_api_call
    async def list_games(self) -> list[Game]:
        try:
            return await self._db.select("games", Game, order=_BY_NAME)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch games") from exc

    @log_api_call
    async def list_classes(self, game_id: str) -> list[GameClass]:
        try:
            return await self._db.select("game_classes", GameClass, order=_BY_NAME, game_id=game_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch classes of game {game_id}") from exc

    @log_api_call
    async def list_events(self, game_id: str) -> list[GameEvent]:
        try:
            return await self._db.select("game_events", GameEvent, order=_BY_NAME, game_id=game_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch events of game {game_id}") from exc

    @log_api_call
    async def list_tracks(self, event_id: str) -> list[EventTrack]:
        try:
            return await self._db.select("event_tracks", EventTrack, order=_BY_NAME, event_id=event_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch tracks of event {event_id}") from exc

    @log_api_call
    async def create_game(self, payload: dict[str, Any]) -> Game:
        try:
            return await self._db.insert("games", Game, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create game") from exc

    @log_api_call
    async def create_class(self, payload: dict[str, Any]) -> GameClass:
        try:
            return await self._db.insert("game_classes", GameClass, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create game class") from exc

    @log_api_call
    async def create_event(self, payload: dict[str, Any]) -> GameEvent:
        try:
            return await self._db.insert("game_events", GameEvent, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create game event") from exc

    @log_api_call
    async def create_track(self, payload: dict[str, Any]) -> EventTrack:
        try:
            return await self._db.insert("event_tracks", EventTrack, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create event track") from exc

    @log_api_call
    async def delete_game(self, game_id: str) -> None:
        try:
            await self._db.delete("games", id=game_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to delete game {game_id}") from exc
