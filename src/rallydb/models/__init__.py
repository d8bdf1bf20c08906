"""rallydb row models."""

from rallydb.models.category import ProductCategory
from rallydb.models.championship import Championship, ChampionshipRally, RallyResult, RallyResultsStatus
from rallydb.models.game import EventTrack, Game, GameClass, GameEvent
from rallydb.models.news import NewsArticle
from rallydb.models.password_reset import PasswordReset
from rallydb.models.rally import Rally, RallyEvent, RallyTrack
from rallydb.models.registration import RallyRegistration
from rallydb.models.team import Team, TeamMember
from rallydb.models.user import AuthSession, AuthUser, User
from rallydb.models.vehicle import GameVehicle

__all__ = [
    "AuthSession",
    "AuthUser",
    "Championship",
    "ChampionshipRally",
    "EventTrack",
    "Game",
    "GameClass",
    "GameEvent",
    "GameVehicle",
    "NewsArticle",
    "PasswordReset",
    "ProductCategory",
    "Rally",
    "RallyEvent",
    "RallyRegistration",
    "RallyResult",
    "RallyResultsStatus",
    "RallyTrack",
    "Team",
    "TeamMember",
    "User",
]
