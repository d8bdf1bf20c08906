"""Shared test fixtures and sample backend rows."""

from __future__ import annotations

import pytest

BASE_URL = "https://rally.example.supabase.co"
REST_URL = f"{BASE_URL}/rest/v1"
AUTH_URL = f"{BASE_URL}/auth/v1"
API_KEY = "anon-test-key"


SAMPLE_USER = {
    "id": "u-1",
    "name": "Mari Tamm",
    "email": "mari@example.com",
    "player_name": "MariT",
    "role": "user",
    "email_verified": True,
    "admin_approved": False,
    "status": "pending_approval",
    "has_team": False,
    "created_at": "2025-03-01T10:00:00+00:00",
    "updated_at": "2025-03-01T10:00:00+00:00",
    "last_login": None,
}

SAMPLE_RALLY = {
    "id": "r-1",
    "name": "Rally Estonia",
    "game_id": "g-1",
    "competition_date": "2025-07-18T18:00:00+00:00",
    "registration_deadline": "2025-07-17T18:00:00+00:00",
    "status": "upcoming",
    "description": "Gravel classic",
    "is_active": True,
    "is_featured": True,
    "created_by": "admin-1",
    "created_at": "2025-06-01T09:00:00+00:00",
    "games": {"name": "EA SPORTS WRC"},
    "rally_events": [
        {
            "event_id": "e-2",
            "event_order": 2,
            "game_events": {"name": "Finland", "event_tracks": []},
        },
        {
            "event_id": "e-1",
            "event_order": 1,
            "game_events": [
                {
                    "name": "Estonia",
                    "event_tracks": [
                        {"id": "t-1", "name": "Otepää", "length_km": 12.3},
                        {"id": "t-2", "name": "Kanepi", "length_km": 9.8},
                    ],
                },
            ],
        },
    ],
}

SAMPLE_TEAM = {
    "id": "team-1",
    "team_name": "Baltic Flyers",
    "manager_id": "u-9",
    "game_id": "g-1",
    "class_id": "c-1",
    "vehicle_id": "v-1",
    "max_members_count": 5,
    "members_count": 3,
    "created_at": "2025-02-01T12:00:00+00:00",
    "vehicle": [{"vehicle_name": "Toyota GR Yaris Rally1"}],
    "game_class": {"name": "Rally1"},
}

SAMPLE_NEWS = {
    "id": "n-1",
    "title": "Season opener announced",
    "content": "<p>See you in Tartu.</p>",
    "cover_image_url": None,
    "cover_image_alt": None,
    "is_published": True,
    "is_featured": False,
    "created_by": "admin-1",
    "created_at": "2025-01-10T08:00:00+00:00",
    "updated_at": None,
    "published_at": "2025-01-10T08:00:00+00:00",
    "users": {"name": "Admin"},
}

SAMPLE_RESULT = {
    "rally_id": "r-1",
    "participant_name": "MariT",
    "user_id": "u-1",
    "manual_participant_id": None,
    "class_name": "Rally1",
    "total_points": 25,
    "extra_points": None,
    "class_position": 1,
}


@pytest.fixture
def base_url() -> str:
    return BASE_URL
