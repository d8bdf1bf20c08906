"""Rally registration models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import pop_related, to_one

RegistrationStatus = Literal["registered", "confirmed", "cancelled", "disqualified", "completed"]
PaymentStatus = Literal["pending", "paid", "refunded", "waived"]


class RallyRegistration(BaseModel):
    """Row of ``rally_registrations``: a user entered into a rally in one class.

    The user, class and rally joins are flattened into ``user_name``,
    ``user_email``, ``class_name`` and ``rally_name``.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    rally_id: str
    user_id: str
    class_id: str | None = None
    registration_date: datetime | None = None
    status: RegistrationStatus = "registered"
    car_number: int | None = None
    team_name: str | None = None
    notes: str | None = None
    entry_fee_paid: float = 0
    payment_status: PaymentStatus = "pending"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user_name: str | None = None
    user_email: str | None = None
    class_name: str | None = None
    rally_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_joins(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "user" in data:
            user = to_one(data.pop("user")) or {}
            data["user_name"] = user.get("name")
            data["user_email"] = user.get("email")
        if "class" in data:
            data["class_name"] = pop_related(data, "class", "name")
        if "rally" in data:
            data["rally_name"] = pop_related(data, "rally", "name")
        return data

    @property
    def is_active(self) -> bool:
        return self.status in ("registered", "confirmed")
