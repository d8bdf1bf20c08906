"""Backend repository for the ``users`` table."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import User
from rallydb.models.user import UserStatus

from ..api_logging import log_api_call
from ._backend import BackendRepository, first_or_not_found, utc_now_iso
from .base import UserRepository
from .errors import translate_error

_NEWEST_FIRST = Order("created_at", ascending=False)


class BackendUserRepository(BackendRepository, UserRepository):

    @log_api_call
    async def list_users(
        self, status: UserStatus | None = None, *, columns: str = "*",
    ) -> list[User]:
        try:
            return await self._db.select(
                "users", User, columns=columns, order=_NEWEST_FIRST, status=status,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch users") from exc

    @log_api_call
    async def list_pending_users(self) -> list[User]:
        try:
            return await self._db.select(
                "users", User, order=_NEWEST_FIRST, status="pending_approval",
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch pending users") from exc

    @log_api_call
    async def get_user(self, user_id: str) -> User:
        try:
            return await self._db.select_one("users", User, id=user_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch user {user_id}") from exc

    @log_api_call
    async def set_status(self, user_id: str, status: UserStatus, admin_approved: bool) -> User:
        payload = {"status": status, "admin_approved": admin_approved, "updated_at": utc_now_iso()}
        try:
            rows = await self._db.update("users", User, payload, id=user_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to set status of user {user_id}") from exc
        return first_or_not_found(rows, f"User {user_id}")

    @log_api_call
    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        payload = {**changes, "updated_at": utc_now_iso()}
        try:
            rows = await self._db.update("users", User, payload, id=user_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update user {user_id}") from exc
        return first_or_not_found(rows, f"User {user_id}")

    @log_api_call
    async def delete_user(self, user_id: str) -> None:
        # team_members, registrations and results cascade on the backend
        try:
            await self._db.delete("users", id=user_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to delete user {user_id}") from exc
