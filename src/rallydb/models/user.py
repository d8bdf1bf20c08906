"""User profile and auth session models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

UserRole = Literal["user", "admin"]
UserStatus = Literal["pending_email", "pending_approval", "approved", "rejected"]


class User(BaseModel):
    """Row of the ``users`` table."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    email: str = ""
    player_name: str | None = None
    role: UserRole = "user"
    email_verified: bool = False
    admin_approved: bool = False
    status: UserStatus = "pending_email"
    has_team: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        """Player name when set, otherwise the account name."""
        return self.player_name or self.name


class AuthUser(BaseModel):
    """Identity returned by the auth API."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None


class AuthSession(BaseModel):
    """Token pair returned by a password sign-in."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user: AuthUser
