"""Tests for RegistrationService and the registration window."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from rallydb.models import GameClass, RallyRegistration
from rallyhub.data.errors import ValidationFailure
from rallyhub.query import keys
from rallyhub.services.registrations import RegistrationService, registration_open
from tests.rallyhub.factories import make_rally

DEADLINE = datetime(2025, 7, 17, 18, 0, tzinfo=UTC)
RALLY1 = GameClass(id="cl-1", game_id="g-1", name="Rally1")


@pytest.fixture
def service(registration_repo, rally_repo, cache):
    return RegistrationService(
        registration_repo, rally_repo, cache, clock=lambda: DEADLINE - timedelta(days=1),
    )


@pytest.fixture
def open_rally(rally_repo, registration_repo):
    rally_repo.get_rally.return_value = make_rally()
    registration_repo.list_rally_classes.return_value = [RALLY1]
    registration_repo.list_for_user.return_value = []
    registration_repo.create_registration.side_effect = lambda payload: RallyRegistration(
        id="reg-1", **payload,
    )


class TestRegistrationOpen:
    @pytest.mark.parametrize(("offset", "expected"), [
        (timedelta(hours=-1), True),
        (timedelta(0), False),
        (timedelta(hours=1), False),
    ])
    def test_deadline(self, offset, expected):
        assert registration_open(make_rally(), DEADLINE + offset) is expected

    def test_no_deadline_falls_back_to_start(self):
        rally = make_rally(registration_deadline=None)
        assert registration_open(rally, DEADLINE + timedelta(hours=1))

    def test_only_upcoming(self):
        assert not registration_open(make_rally(status="active"), DEADLINE - timedelta(days=3))

    def test_naive_deadline_treated_as_utc(self):
        rally = make_rally(registration_deadline="2025-07-17T18:00:00")
        assert not registration_open(rally, DEADLINE + timedelta(minutes=1))


class TestReads:
    @pytest.mark.asyncio
    async def test_cached_per_rally(self, service, registration_repo):
        registration_repo.list_for_rally.return_value = []
        await service.list_registrations("r-1")
        await service.list_registrations("r-1")
        await service.list_registrations("r-2")
        assert registration_repo.list_for_rally.await_count == 2

    @pytest.mark.asyncio
    async def test_user_registrations(self, service, registration_repo, cache):
        registration_repo.list_for_user.return_value = []
        await service.list_user_registrations("u-1")
        registration_repo.list_for_user.assert_awaited_once_with("u-1")
        assert cache.peek(keys.registrations.user("u-1")) == []


class TestRegister:
    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_creates_pending_registration(self, service, registration_repo):
        reg = await service.register("r-1", "u-1", "cl-1", car_number=7, team_name="")

        payload = registration_repo.create_registration.await_args.args[0]
        assert payload == {
            "rally_id": "r-1",
            "user_id": "u-1",
            "class_id": "cl-1",
            "car_number": 7,
            "team_name": None,
            "notes": None,
            "status": "registered",
            "entry_fee_paid": 0,
            "payment_status": "pending",
        }
        assert reg.id == "reg-1"

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_invalidates_rally_and_user_lists(self, service, cache):
        cache.set_data(keys.registrations.rally("r-1"), [], stale_time=60)
        cache.set_data(keys.registrations.user("u-1"), [], stale_time=60)
        cache.set_data(keys.registrations.rally("r-2"), [], stale_time=60)

        await service.register("r-1", "u-1", "cl-1")

        assert cache.is_stale(keys.registrations.rally("r-1"))
        assert cache.is_stale(keys.registrations.user("u-1"))
        assert not cache.is_stale(keys.registrations.rally("r-2"))

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_closed(self, service, rally_repo, registration_repo):
        rally_repo.get_rally.return_value = make_rally(status="completed")
        with pytest.raises(ValidationFailure, match="closed"):
            await service.register("r-1", "u-1", "cl-1")
        registration_repo.create_registration.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_class_not_offered(self, service, registration_repo):
        with pytest.raises(ValidationFailure, match="not open"):
            await service.register("r-1", "u-1", "cl-9")
        registration_repo.create_registration.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_already_registered(self, service, registration_repo):
        registration_repo.list_for_user.return_value = [
            RallyRegistration(rally_id="r-1", user_id="u-1", status="confirmed"),
        ]
        with pytest.raises(ValidationFailure, match="Already registered"):
            await service.register("r-1", "u-1", "cl-1")
        registration_repo.create_registration.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("open_rally")
    async def test_cancelled_entry_can_register_again(self, service, registration_repo):
        registration_repo.list_for_user.return_value = [
            RallyRegistration(rally_id="r-1", user_id="u-1", status="cancelled"),
            RallyRegistration(rally_id="r-2", user_id="u-1"),
        ]
        await service.register("r-1", "u-1", "cl-1")
        registration_repo.create_registration.assert_awaited_once()
