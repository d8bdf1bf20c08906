"""News article model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from rallydb.models._joins import pop_related


class NewsArticle(BaseModel):
    """Row of ``news`` with the author's name flattened in."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    cover_image_url: str | None = None
    cover_image_alt: str | None = None
    is_published: bool = False
    is_featured: bool = False
    created_by: str | None = None
    author_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_author(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "users" not in data:
            return data
        data = dict(data)
        data["author_name"] = pop_related(data, "users", "name")
        return data
