"""Backend repository for password reset tokens."""

from __future__ import annotations

from datetime import datetime

from rallydb import Filter, RallyDBError
from rallydb.models import PasswordReset

from ..api_logging import log_api_call
from ._backend import BackendRepository
from .base import PasswordResetRepository
from .errors import translate_error


class BackendPasswordResetRepository(BackendRepository, PasswordResetRepository):

    @log_api_call
    async def find_valid(self, token: str, now: datetime) -> PasswordReset | None:
        """Return the unused, unexpired reset row for *token*, or None."""
        try:
            rows = await self._db.select(
                "password_resets", PasswordReset,
                limit=1,
                token=token,
                used=False,
                expires_at=Filter(gte=now),
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to validate reset token") from exc
        return rows[0] if rows else None
