"""Backend repository for rally registrations and the classes a rally offers."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import GameClass, RallyRegistration
from rallydb.models._joins import to_one

from ..api_logging import log_api_call
from ..constants import RALLY_CLASS_COLUMNS, REGISTRATION_COLUMNS
from ._backend import BackendRepository
from .base import RegistrationRepository
from .errors import translate_error

_BY_REGISTRATION_DATE = Order("registration_date")


class BackendRegistrationRepository(BackendRepository, RegistrationRepository):

    @log_api_call
    async def list_for_rally(self, rally_id: str) -> list[RallyRegistration]:
        try:
            return await self._db.select(
                "rally_registrations", RallyRegistration,
                columns=REGISTRATION_COLUMNS,
                order=_BY_REGISTRATION_DATE,
                rally_id=rally_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch registrations of rally {rally_id}") from exc

    @log_api_call
    async def list_for_user(self, user_id: str) -> list[RallyRegistration]:
        try:
            return await self._db.select(
                "rally_registrations", RallyRegistration,
                columns=REGISTRATION_COLUMNS,
                order=_BY_REGISTRATION_DATE,
                user_id=user_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch registrations of user {user_id}") from exc

    @log_api_call
    async def list_rally_classes(self, rally_id: str) -> list[GameClass]:
        try:
            rows = await self._db.select(
                "rally_classes", dict, columns=RALLY_CLASS_COLUMNS, rally_id=rally_id, is_active=True,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch classes of rally {rally_id}") from exc
        classes = (to_one(row.get("class")) for row in rows)
        return [GameClass.model_validate(c) for c in classes if c is not None]

    @log_api_call
    async def create_registration(self, payload: dict[str, Any]) -> RallyRegistration:
        try:
            return await self._db.insert(
                "rally_registrations", RallyRegistration, payload, columns=REGISTRATION_COLUMNS,
            )
        except RallyDBError as exc:
            raise translate_error(
                exc, f"Failed to register for rally {payload.get('rally_id')}",
            ) from exc
