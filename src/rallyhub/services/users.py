"""User administration service: listing, approval, rejection, profile edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rallydb.models import User
from rallydb.models.user import UserStatus

from ..api_logging import log_service_call
from ..data.base import UserRepository
from ..data.errors import ValidationFailure
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService

logger = logging.getLogger(__name__)

# Fields a user may change on their own profile.
PROFILE_FIELDS = frozenset({"name", "player_name"})


@dataclass(frozen=True)
class UserStats:
    total_users: int
    pending_email: int
    pending_approval: int
    approved: int
    rejected: int


def is_awaiting_approval(user: User) -> bool:
    """Verified e-mail, not yet approved by an admin."""
    return user.status == "pending_approval" and user.email_verified and not user.admin_approved


def compute_user_stats(users: list[User]) -> UserStats:
    return UserStats(
        total_users=len(users),
        pending_email=sum(1 for u in users if u.status == "pending_email"),
        pending_approval=sum(1 for u in users if is_awaiting_approval(u)),
        approved=sum(1 for u in users if u.status == "approved"),
        rejected=sum(1 for u in users if u.status == "rejected"),
    )


class UserService(CachedService):
    """Business logic for user administration."""

    def __init__(self, repo: UserRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_users(self, status: UserStatus | None = None) -> list[User]:
        filters = {"status": status} if status else {}
        return await self._read(
            keys.users.list(filters), "users.list",
            lambda: self._repo.list_users(status),
        )

    @log_service_call
    async def list_pending(self) -> list[User]:
        return await self._read(keys.users.pending(), "users.pending", self._repo.list_pending_users)

    @log_service_call
    async def get_user(self, user_id: str) -> User:
        return await self._read(
            keys.users.detail(user_id), "users.detail",
            lambda: self._repo.get_user(user_id),
        )

    @log_service_call
    async def get_stats(self) -> UserStats:
        return compute_user_stats(await self.list_users())

    @log_service_call
    async def approve_user(self, user_id: str) -> User:
        user = await self._repo.set_status(user_id, "approved", admin_approved=True)
        self._invalidate("approve_user", user_id=user_id)
        return user

    @log_service_call
    async def reject_user(self, user_id: str, reason: str) -> User:
        """Reject a pending registration; *reason* goes to the rejection notice."""
        if not reason or not reason.strip():
            raise ValidationFailure("A rejection reason is required")
        user = await self._repo.set_status(user_id, "rejected", admin_approved=False)
        logger.info("rejected user %s: %s", user_id, reason.strip())
        self._invalidate("reject_user", user_id=user_id)
        return user

    @log_service_call
    async def delete_user(self, user_id: str) -> None:
        await self._repo.delete_user(user_id)
        self._invalidate("delete_user", user_id=user_id)
        self._forget(keys.users.detail(user_id))

    @log_service_call
    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        unknown = set(changes) - PROFILE_FIELDS
        if unknown:
            raise ValidationFailure(f"Cannot change profile fields: {', '.join(sorted(unknown))}")
        user = await self._repo.update_profile(user_id, changes)
        self._invalidate("update_profile", user_id=user_id)
        return user
