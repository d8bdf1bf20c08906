"""Password reset token model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PasswordReset(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    email: str
    used: bool = False
    expires_at: datetime

    def is_valid_at(self, now: datetime) -> bool:
        return not self.used and self.expires_at >= now
