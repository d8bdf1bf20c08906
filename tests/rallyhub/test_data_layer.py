"""Tests for rallyhub/data/ — errors, base ABCs, and the repository factory."""

from __future__ import annotations

import pytest

from rallydb import AsyncRallyDBClient
from rallydb.exceptions import (
    RallyDBAPIError,
    RallyDBConnectionError,
    RallyDBNotFoundError,
    RallyDBTimeoutError,
    RallyDBUnauthorizedError,
    RallyDBValidationError,
)
from rallyhub.constants import GENERIC_FAILURE_MESSAGE
from rallyhub.data import Repositories, get_repositories
from rallyhub.data._backend import first_or_not_found
from rallyhub.data.base import CategoryRepository
from rallyhub.data.errors import (
    DataError,
    NotFound,
    TransportFailure,
    Unauthorized,
    UnknownDataError,
    ValidationFailure,
    translate_error,
    user_message,
)
from rallyhub.data.results import BackendResultRepository
from rallyhub.data.users import BackendUserRepository
from rallyhub.data.vehicles import BackendVehicleRepository
from tests.conftest import API_KEY, BASE_URL


class TestTranslateError:
    @pytest.mark.parametrize(("exc", "expected"), [
        (RallyDBNotFoundError(406, "0 rows", code="PGRST116"), NotFound),
        (RallyDBUnauthorizedError(403, "permission denied", code="42501"), Unauthorized),
        (RallyDBValidationError("duplicate key", status_code=409, code="23505"), ValidationFailure),
        (RallyDBConnectionError("refused"), TransportFailure),
        (RallyDBTimeoutError("timed out"), TransportFailure),
        (RallyDBAPIError(500, "internal"), UnknownDataError),
    ])
    def test_mapping(self, exc, expected):
        err = translate_error(exc, "Failed to fetch users")
        assert type(err) is expected
        assert isinstance(err, DataError)
        assert str(err).startswith("Failed to fetch users: ")

    def test_backend_message_kept(self):
        err = translate_error(RallyDBValidationError("value too long", status_code=400), "Failed to create team")
        assert err.backend_message == "value too long"


class TestUserMessage:
    def test_backend_message_preferred(self):
        assert user_message(ValidationFailure("x", backend_message="Name taken")) == "Name taken"

    def test_generic_fallback(self):
        assert user_message(TransportFailure("offline")) == GENERIC_FAILURE_MESSAGE
        assert user_message(RuntimeError("bug")) == GENERIC_FAILURE_MESSAGE

    def test_custom_fallback(self):
        assert user_message(NotFound("gone"), fallback="Not there") == "Not there"


class TestBaseRepository:
    def test_cannot_instantiate_abc(self):
        with pytest.raises(TypeError):
            CategoryRepository()

    def test_partial_implementation_fails(self):
        class PartialRepo(CategoryRepository):
            async def list_categories(self):
                return []

        with pytest.raises(TypeError):
            PartialRepo()


def test_first_or_not_found():
    assert first_or_not_found([1, 2], "Row") == 1
    with pytest.raises(NotFound, match="Team t-9 not found"):
        first_or_not_found([], "Team t-9")


@pytest.mark.asyncio
async def test_factory_shares_client():
    async with AsyncRallyDBClient(BASE_URL, API_KEY) as client:
        repos = get_repositories(client)
    assert isinstance(repos, Repositories)
    assert isinstance(repos.users, BackendUserRepository)
    assert repos.users._db is client
    assert repos.news._db is client
    assert isinstance(repos.results, BackendResultRepository)
    assert isinstance(repos.vehicles, BackendVehicleRepository)
    assert repos.registrations._db is client
