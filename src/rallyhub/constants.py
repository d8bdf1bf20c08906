"""Shared constants for rallyhub."""

from datetime import timedelta

# A rally counts as finished this long after its start.
RALLY_COMPLETION_GRACE = timedelta(hours=1)

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."

DEFAULT_LATEST_NEWS_LIMIT = 3
DEFAULT_TEAM_SIZE = 5

# Column lists for embedded selects
RALLY_DETAIL_COLUMNS = (
    "*,games(name),"
    "rally_events(event_id,event_order,game_events(name,event_tracks(id,name,length_km)))"
)
NEWS_COLUMNS = "*,users!news_created_by_fkey(name)"
TEAM_COLUMNS = (
    "*,vehicle:game_vehicles!teams_vehicle_id_fkey(vehicle_name),"
    "game_class:game_classes!teams_class_id_fkey(name)"
)
TEAM_MEMBER_COLUMNS = "*,user:users!team_members_user_id_fkey(name)"
CHAMPIONSHIP_RALLY_COLUMNS = "championship_id,rally_id,round_number,is_active,rallies!inner(name,competition_date)"
PENDING_USER_COLUMNS = "id,name,email,created_at,email_verified,admin_approved,status"
RALLY_RESULT_COLUMNS = (
    "id,rally_id,participant_name,user_id,manual_participant_id,"
    "class_name,total_points,extra_points,class_position,overall_position"
)
REGISTRATION_CLASS_COLUMNS = "user_id,rally_id,class:game_classes!inner(name)"
REGISTRATION_COLUMNS = "*,user:users(name,email),class:game_classes(name),rally:rallies(name)"
RALLY_CLASS_COLUMNS = "class:game_classes(id,game_id,name)"
GAME_VEHICLE_COLUMNS = "*,game:games(name)"
