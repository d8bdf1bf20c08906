"""Product category model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProductCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    is_active: bool = True
    sort_order: int = 0
