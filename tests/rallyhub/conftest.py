"""Shared fixtures for rallyhub tests."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from rallyhub.data import Repositories
from rallyhub.data.base import (
    CategoryRepository,
    ChampionshipRepository,
    GameRepository,
    NewsRepository,
    PasswordResetRepository,
    RallyRepository,
    RegistrationRepository,
    ResultRepository,
    TeamRepository,
    UserRepository,
    VehicleRepository,
)
from rallyhub.query.cache import QueryCache
from tests.rallyhub.factories import FakeClock


@pytest.fixture(autouse=True)
def _api_log_to_tmp(tmp_path):
    """Point the API call log at tmp_path and reset the cached logger."""
    import rallyhub.api_logging as mod

    old_logger, old_dir, old_file = mod._logger, mod._LOG_DIR, mod._LOG_FILE
    named_logger = logging.getLogger("rallyhub.api")
    named_logger.handlers.clear()

    mod._logger = None
    mod._LOG_DIR = str(tmp_path)
    mod._LOG_FILE = str(tmp_path / "api_calls.log")

    yield tmp_path

    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    mod._logger, mod._LOG_DIR, mod._LOG_FILE = old_logger, old_dir, old_file


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> QueryCache:
    return QueryCache(default_timeout=5.0, clock=clock)


# ── Repository mocks ─────────────────────────────────────────


@pytest.fixture
def user_repo() -> MagicMock:
    return MagicMock(spec=UserRepository)


@pytest.fixture
def rally_repo() -> MagicMock:
    return MagicMock(spec=RallyRepository)


@pytest.fixture
def championship_repo() -> MagicMock:
    return MagicMock(spec=ChampionshipRepository)


@pytest.fixture
def team_repo() -> MagicMock:
    return MagicMock(spec=TeamRepository)


@pytest.fixture
def game_repo() -> MagicMock:
    return MagicMock(spec=GameRepository)


@pytest.fixture
def news_repo() -> MagicMock:
    return MagicMock(spec=NewsRepository)


@pytest.fixture
def category_repo() -> MagicMock:
    return MagicMock(spec=CategoryRepository)


@pytest.fixture
def reset_repo() -> MagicMock:
    return MagicMock(spec=PasswordResetRepository)


@pytest.fixture
def registration_repo() -> MagicMock:
    return MagicMock(spec=RegistrationRepository)


@pytest.fixture
def result_repo() -> MagicMock:
    return MagicMock(spec=ResultRepository)


@pytest.fixture
def vehicle_repo() -> MagicMock:
    return MagicMock(spec=VehicleRepository)


@pytest.fixture
def repositories(
    user_repo, rally_repo, championship_repo, team_repo,
    game_repo, news_repo, category_repo, reset_repo,
    registration_repo, result_repo, vehicle_repo,
) -> Repositories:
    return Repositories(
        users=user_repo,
        rallies=rally_repo,
        championships=championship_repo,
        teams=team_repo,
        games=game_repo,
        news=news_repo,
        categories=category_repo,
        password_resets=reset_repo,
        registrations=registration_repo,
        results=result_repo,
        vehicles=vehicle_repo,
    )
