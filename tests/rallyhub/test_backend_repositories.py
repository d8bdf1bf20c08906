"""Tests for the backend repositories against a mocked REST API."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import httpx
import pytest
import respx

from rallydb import AsyncRallyDBClient
from rallyhub.constants import PENDING_USER_COLUMNS
from rallyhub.data import get_repositories
from rallyhub.data.errors import NotFound, TransportFailure, Unauthorized, UnknownDataError, ValidationFailure
from tests.conftest import API_KEY, BASE_URL, REST_URL, SAMPLE_NEWS, SAMPLE_RALLY, SAMPLE_RESULT, SAMPLE_TEAM, SAMPLE_USER

NOW = datetime(2025, 7, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
async def repos():
    async with AsyncRallyDBClient(BASE_URL, API_KEY) as client:
        yield get_repositories(client)


def _params(route) -> httpx.QueryParams:
    return route.calls.last.request.url.params


class TestUsers:
    @respx.mock
    @pytest.mark.asyncio
    async def test_list_by_status(self, repos):
        route = respx.get(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[SAMPLE_USER]))
        users = await repos.users.list_users("pending_approval")
        assert [u.id for u in users] == ["u-1"]
        assert _params(route)["status"] == "eq.pending_approval"
        assert _params(route)["order"] == "created_at.desc"

    @respx.mock
    @pytest.mark.asyncio
    async def test_list_all_has_no_status_filter(self, repos):
        route = respx.get(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[]))
        await repos.users.list_users()
        assert "status" not in _params(route)

    @respx.mock
    @pytest.mark.asyncio
    async def test_list_with_summary_columns(self, repos):
        route = respx.get(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[SAMPLE_USER]))
        await repos.users.list_users(columns=PENDING_USER_COLUMNS)
        assert _params(route)["select"] == PENDING_USER_COLUMNS

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_missing_user(self, repos):
        respx.get(f"{REST_URL}/users").mock(
            return_value=httpx.Response(406, json={"code": "PGRST116", "message": "0 rows"}),
        )
        with pytest.raises(NotFound):
            await repos.users.get_user("ghost")

    @respx.mock
    @pytest.mark.asyncio
    async def test_set_status_payload(self, repos):
        route = respx.patch(f"{REST_URL}/users").mock(
            return_value=httpx.Response(200, json=[{**SAMPLE_USER, "status": "rejected"}]),
        )
        user = await repos.users.set_status("u-1", "rejected", admin_approved=False)
        assert user.status == "rejected"
        body = json.loads(route.calls.last.request.content)
        assert body["status"] == "rejected"
        assert body["admin_approved"] is False
        assert "updated_at" in body

    @respx.mock
    @pytest.mark.asyncio
    async def test_update_matching_nothing(self, repos):
        respx.patch(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[]))
        with pytest.raises(NotFound):
            await repos.users.update_profile("ghost", {"name": "x"})

    @respx.mock
    @pytest.mark.asyncio
    async def test_row_level_denial(self, repos):
        respx.delete(f"{REST_URL}/users").mock(
            return_value=httpx.Response(403, json={"code": "42501", "message": "permission denied"}),
        )
        with pytest.raises(Unauthorized):
            await repos.users.delete_user("u-1")


class TestRallies:
    @respx.mock
    @pytest.mark.asyncio
    async def test_upcoming_query(self, repos):
        route = respx.get(f"{REST_URL}/rallies").mock(return_value=httpx.Response(200, json=[SAMPLE_RALLY]))
        rallies = await repos.rallies.list_upcoming(5, NOW)
        assert rallies[0].game_name == "EA SPORTS WRC"
        params = _params(route)
        assert params["limit"] == "5"
        assert params["status"] == "eq.upcoming"
        assert params["competition_date"] == f"gte.{NOW.isoformat()}"

    @respx.mock
    @pytest.mark.asyncio
    async def test_server_error(self, repos):
        respx.get(f"{REST_URL}/rallies").mock(return_value=httpx.Response(500, json={"message": "oops"}))
        with pytest.raises(UnknownDataError):
            await repos.rallies.list_featured(3)

    @respx.mock
    @pytest.mark.asyncio
    async def test_unreachable(self, repos):
        respx.get(f"{REST_URL}/rallies").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(TransportFailure):
            await repos.rallies.list_rallies()


class TestChampionships:
    @pytest.mark.asyncio
    async def test_results_for_no_rounds_skip_request(self, repos):
        assert await repos.championships.list_results([]) == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_results_by_rally_ids(self, repos):
        route = respx.get(f"{REST_URL}/rally_results").mock(
            return_value=httpx.Response(200, json=[SAMPLE_RESULT]),
        )
        results = await repos.championships.list_results(["r-1", "r-2"])
        assert results[0].extra_points == 0
        assert _params(route)["rally_id"] == "in.(r-1,r-2)"

    @respx.mock
    @pytest.mark.asyncio
    async def test_named_results_skip_lookups(self, repos):
        respx.get(f"{REST_URL}/rally_results").mock(return_value=httpx.Response(200, json=[SAMPLE_RESULT]))
        users = respx.get(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[]))
        [result] = await repos.championships.list_results(["r-1"])
        assert result.player_name is None
        assert not users.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_nameless_registered_results_looked_up(self, repos):
        nameless = {**SAMPLE_RESULT, "participant_name": None, "class_name": None}
        respx.get(f"{REST_URL}/rally_results").mock(return_value=httpx.Response(200, json=[
            {**nameless, "user_id": "u-1"},
            {**nameless, "user_id": "u-2", "total_points": 18},
            SAMPLE_RESULT | {"user_id": "u-3", "participant_name": "Guest"},
        ]))
        users = respx.get(f"{REST_URL}/users").mock(return_value=httpx.Response(200, json=[
            {"id": "u-1", "player_name": "MariT"},
            {"id": "u-2", "player_name": "JaanK"},
        ]))
        registrations = respx.get(f"{REST_URL}/rally_registrations").mock(
            return_value=httpx.Response(200, json=[
                {"user_id": "u-1", "rally_id": "r-1", "class": {"name": "Rally1"}},
                {"user_id": "u-2", "rally_id": "r-1", "class": {"name": "Rally2"}},
            ]),
        )

        results = await repos.championships.list_results(["r-1"])

        assert [(r.user_id, r.player_name, r.registered_class) for r in results] == [
            ("u-1", "MariT", "Rally1"),
            ("u-2", "JaanK", "Rally2"),
            ("u-3", None, None),
        ]
        assert _params(users)["id"] == "in.(u-1,u-2)"
        assert _params(users)["select"] == "id,player_name"
        reg_params = _params(registrations)
        assert reg_params["rally_id"] == "in.(r-1)"
        assert reg_params["user_id"] == "in.(u-1,u-2)"
        assert "game_classes!inner(name)" in reg_params["select"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_duplicate_round_rejected(self, repos):
        respx.post(f"{REST_URL}/championship_rallies").mock(
            return_value=httpx.Response(409, json={"code": "23505", "message": "duplicate key value"}),
        )
        with pytest.raises(ValidationFailure) as info:
            await repos.championships.add_round("c-1", "r-1", 1)
        assert info.value.backend_message == "duplicate key value"


class TestTeams:
    @respx.mock
    @pytest.mark.asyncio
    async def test_no_membership(self, repos):
        route = respx.get(f"{REST_URL}/team_members").mock(return_value=httpx.Response(200, json=[]))
        assert await repos.teams.find_membership("u-1") is None
        assert _params(route)["status"] == "eq.approved"

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_team_flattens_joins(self, repos):
        respx.get(f"{REST_URL}/teams").mock(return_value=httpx.Response(200, json=SAMPLE_TEAM))
        team = await repos.teams.get_team("team-1")
        assert team.class_name == "Rally1"


class TestNews:
    @respx.mock
    @pytest.mark.asyncio
    async def test_unpublished_article_is_none(self, repos):
        route = respx.get(f"{REST_URL}/news").mock(
            return_value=httpx.Response(406, json={"code": "PGRST116", "message": "0 rows"}),
        )
        assert await repos.news.get_published("n-draft") is None
        assert _params(route)["is_published"] == "eq.true"

    @respx.mock
    @pytest.mark.asyncio
    async def test_latest(self, repos):
        route = respx.get(f"{REST_URL}/news").mock(return_value=httpx.Response(200, json=[SAMPLE_NEWS]))
        articles = await repos.news.list_published(3)
        assert articles[0].author_name == "Admin"
        assert _params(route)["order"] == "published_at.desc"


class TestPasswordResets:
    @respx.mock
    @pytest.mark.asyncio
    async def test_no_valid_token(self, repos):
        route = respx.get(f"{REST_URL}/password_resets").mock(return_value=httpx.Response(200, json=[]))
        assert await repos.password_resets.find_valid("tok", NOW) is None
        params = _params(route)
        assert params["token"] == "eq.tok"
        assert params["used"] == "eq.false"
        assert params["expires_at"] == f"gte.{NOW.isoformat()}"


class TestRegistrations:
    @respx.mock
    @pytest.mark.asyncio
    async def test_rally_registrations_flatten_joins(self, repos):
        route = respx.get(f"{REST_URL}/rally_registrations").mock(return_value=httpx.Response(200, json=[{
            "id": "reg-1", "rally_id": "r-1", "user_id": "u-1", "class_id": "cl-1",
            "user": {"name": "Mari Tamm", "email": "mari@example.com"},
            "class": {"name": "Rally1"}, "rally": {"name": "Rally Estonia"},
        }]))
        [reg] = await repos.registrations.list_for_rally("r-1")
        assert (reg.user_name, reg.class_name, reg.rally_name) == ("Mari Tamm", "Rally1", "Rally Estonia")
        params = _params(route)
        assert params["rally_id"] == "eq.r-1"
        assert params["order"] == "registration_date.asc"

    @respx.mock
    @pytest.mark.asyncio
    async def test_active_rally_classes(self, repos):
        route = respx.get(f"{REST_URL}/rally_classes").mock(return_value=httpx.Response(200, json=[
            {"class": {"id": "cl-1", "game_id": "g-1", "name": "Rally1"}},
            {"class": None},
        ]))
        classes = await repos.registrations.list_rally_classes("r-1")
        assert [c.name for c in classes] == ["Rally1"]
        assert _params(route)["is_active"] == "eq.true"


class TestResults:
    @respx.mock
    @pytest.mark.asyncio
    async def test_manual_lookup_ignores_registered_rows(self, repos):
        route = respx.get(f"{REST_URL}/rally_results").mock(return_value=httpx.Response(200, json=[]))
        assert await repos.results.find_result("r-1", participant_name="Guest") is None
        params = _params(route)
        assert params["participant_name"] == "eq.Guest"
        assert params["user_id"] == "is.null"
        assert params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_lookup_needs_identity(self, repos):
        with pytest.raises(ValueError):
            await repos.results.find_result("r-1")

    @respx.mock
    @pytest.mark.asyncio
    async def test_mark_completed_upserts(self, repos):
        route = respx.post(f"{REST_URL}/rally_results_status").mock(
            return_value=httpx.Response(201, json={"rally_id": "r-1", "results_completed": True}),
        )
        status = await repos.results.mark_completed("r-1", "admin-1")
        assert status.results_completed
        request = route.calls.last.request
        assert request.url.params["on_conflict"] == "rally_id"
        assert "resolution=merge-duplicates" in request.headers["Prefer"]
        body = json.loads(request.content)
        assert body["completed_by"] == "admin-1"
        assert body["results_completed"] is True


class TestVehicles:
    @respx.mock
    @pytest.mark.asyncio
    async def test_list_ordered_by_game_then_name(self, repos):
        route = respx.get(f"{REST_URL}/game_vehicles").mock(return_value=httpx.Response(200, json=[
            {"id": "v-1", "vehicle_name": "Ford Puma", "game_id": "g-1", "game": {"name": "EA WRC"}},
        ]))
        [vehicle] = await repos.vehicles.list_vehicles()
        assert vehicle.game_name == "EA WRC"
        params = _params(route)
        assert params["order"] == "game_id.asc,vehicle_name.asc"
        assert "game_id" not in params

    @respx.mock
    @pytest.mark.asyncio
    async def test_in_use_checks_teams(self, repos):
        route = respx.get(f"{REST_URL}/teams").mock(return_value=httpx.Response(200, json=[{"id": "team-1"}]))
        assert await repos.vehicles.is_in_use("v-1")
        params = _params(route)
        assert params["vehicle_id"] == "eq.v-1"
        assert params["limit"] == "1"
