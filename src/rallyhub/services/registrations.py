"""Rally registration service: who entered which rally, in which class."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from rallydb.models import GameClass, Rally, RallyRegistration

from ..api_logging import log_service_call
from ..data.base import RallyRepository, RegistrationRepository
from ..data.errors import ValidationFailure
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService
from .rallies import utc_now


def registration_open(rally: Rally, now: datetime) -> bool:
    """True while *rally* is upcoming and its registration deadline has not passed.

    A rally without a deadline takes entries until it starts.
    """
    if rally.status != "upcoming":
        return False
    deadline = rally.registration_deadline or rally.competition_date
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=UTC)
    return now < deadline


class RegistrationService(CachedService):
    """Business logic for entering rallies."""

    def __init__(
        self,
        repo: RegistrationRepository,
        rallies: RallyRepository,
        cache: QueryCache,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(cache)
        self._repo = repo
        self._rallies = rallies
        self._clock = clock

    @log_service_call
    async def list_registrations(self, rally_id: str) -> list[RallyRegistration]:
        return await self._read(
            keys.registrations.rally(rally_id), "registrations.rally",
            lambda: self._repo.list_for_rally(rally_id),
        )

    @log_service_call
    async def list_user_registrations(self, user_id: str) -> list[RallyRegistration]:
        return await self._read(
            keys.registrations.user(user_id), "registrations.user",
            lambda: self._repo.list_for_user(user_id),
        )

    @log_service_call
    async def list_available_classes(self, rally_id: str) -> list[GameClass]:
        return await self._read(
            keys.registrations.classes(rally_id), "registrations.classes",
            lambda: self._repo.list_rally_classes(rally_id),
        )

    @log_service_call
    async def register(
        self,
        rally_id: str,
        user_id: str,
        class_id: str,
        *,
        car_number: int | None = None,
        team_name: str | None = None,
        notes: str | None = None,
    ) -> RallyRegistration:
        """Enter *user_id* into *rally_id* in one of the classes the rally offers."""
        rally = await self._rallies.get_rally(rally_id)
        if not registration_open(rally, self._clock()):
            raise ValidationFailure(f"Registration for {rally.name} is closed")
        classes = await self.list_available_classes(rally_id)
        if class_id not in {c.id for c in classes}:
            raise ValidationFailure(f"Class {class_id} is not open in {rally.name}")
        existing = await self._repo.list_for_user(user_id)
        if any(r.rally_id == rally_id and r.is_active for r in existing):
            raise ValidationFailure(f"Already registered for {rally.name}")

        registration = await self._repo.create_registration({
            "rally_id": rally_id,
            "user_id": user_id,
            "class_id": class_id,
            "car_number": car_number,
            "team_name": team_name or None,
            "notes": notes or None,
            "status": "registered",
            "entry_fee_paid": 0,
            "payment_status": "pending",
        })
        self._invalidate("register_for_rally", rally_id=rally_id, user_id=user_id)
        return registration
