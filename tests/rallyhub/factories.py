"""Record factories and a hand-driven clock for rallyhub tests."""

from __future__ import annotations

from datetime import UTC, datetime

from rallydb.models import (
    Championship,
    ChampionshipRally,
    NewsArticle,
    Rally,
    RallyResult,
    Team,
    TeamMember,
    User,
)
from tests.conftest import SAMPLE_NEWS, SAMPLE_RALLY, SAMPLE_TEAM, SAMPLE_USER


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_user(user_id: str = "u-1", **overrides) -> User:
    return User.model_validate({**SAMPLE_USER, "id": user_id, **overrides})


def make_rally(rally_id: str = "r-1", **overrides) -> Rally:
    return Rally.model_validate({**SAMPLE_RALLY, "id": rally_id, **overrides})


def make_team(team_id: str = "team-1", **overrides) -> Team:
    return Team.model_validate({**SAMPLE_TEAM, "id": team_id, **overrides})


def make_member(member_id: str = "m-1", **overrides) -> TeamMember:
    data = {"id": member_id, "team_id": "team-1", "user_id": "u-1", "status": "pending"}
    return TeamMember.model_validate({**data, **overrides})


def make_article(article_id: str = "n-1", **overrides) -> NewsArticle:
    return NewsArticle.model_validate({**SAMPLE_NEWS, "id": article_id, **overrides})


def make_round(rally_id: str, round_number: int, **overrides) -> ChampionshipRally:
    data = {"championship_id": "c-1", "rally_id": rally_id, "round_number": round_number}
    return ChampionshipRally.model_validate({**data, **overrides})


def make_result(rally_id: str, **overrides) -> RallyResult:
    data = {"rally_id": rally_id, "participant_name": "MariT", "user_id": "u-1", "class_name": "Rally1"}
    return RallyResult.model_validate({**data, **overrides})


CHAMPIONSHIP = Championship(
    id="c-1", name="Baltic Cup 2025", season_year=2025, status="ongoing",
    created_at=datetime(2025, 1, 1, tzinfo=UTC),
)
