"""Explicit per-application session context.

Create one at startup and pass it to whatever needs the current user.
"""

from __future__ import annotations

import logging

from rallydb import AsyncRallyDBClient, RallyDBError
from rallydb.models import AuthSession, User

from .data.base import UserRepository
from .data.errors import Unauthorized, translate_error

logger = logging.getLogger(__name__)


class SessionContext:
    """Signed-in identity plus the loaded ``users`` profile.

    Usage:
        session = SessionContext(client, repos.users)
        await session.sign_in(email, password)
        admin = session.require_admin()
    """

    def __init__(self, client: AsyncRallyDBClient, users: UserRepository) -> None:
        self._client = client
        self._users = users
        self._auth: AuthSession | None = None
        self._profile: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._auth is not None

    @property
    def user_id(self) -> str | None:
        return self._auth.user.id if self._auth is not None else None

    @property
    def profile(self) -> User | None:
        return self._profile

    async def sign_in(self, email: str, password: str) -> User:
        """Authenticate, then load the profile row for the signed-in user."""
        try:
            self._auth = await self._client.sign_in_with_password(email, password)
        except RallyDBError as exc:
            raise translate_error(exc, "Sign-in failed") from exc
        logger.info("signed in %s", self._auth.user.id)
        return await self.reload_profile()

    async def reload_profile(self) -> User:
        user_id = self.user_id
        if user_id is None:
            raise Unauthorized("Not signed in")
        self._profile = await self._users.get_user(user_id)
        return self._profile

    async def sign_out(self) -> None:
        try:
            if self._auth is not None:
                await self._client.sign_out()
        except RallyDBError as exc:
            raise translate_error(exc, "Sign-out failed") from exc
        finally:
            self._auth = None
            self._profile = None

    def require_user(self) -> User:
        if self._profile is None:
            raise Unauthorized("Sign in to continue")
        return self._profile

    def require_admin(self) -> User:
        user = self.require_user()
        if not user.is_admin:
            raise Unauthorized("Administrator access required")
        return user
