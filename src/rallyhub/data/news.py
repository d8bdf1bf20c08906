"""Backend repository for news articles."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError, RallyDBNotFoundError
from rallydb.models import NewsArticle

from ..api_logging import log_api_call
from ..constants import NEWS_COLUMNS
from ._backend import BackendRepository, first_or_not_found, utc_now_iso
from .base import NewsRepository
from .errors import translate_error


class BackendNewsRepository(BackendRepository, NewsRepository):

    @log_api_call
    async def list_published(self, limit: int) -> list[NewsArticle]:
        try:
            return await self._db.select(
                "news", NewsArticle,
                columns=NEWS_COLUMNS,
                order=Order("published_at", ascending=False),
                limit=limit,
                is_published=True,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch latest news") from exc

    @log_api_call
    async def get_published(self, article_id: str) -> NewsArticle | None:
        try:
            return await self._db.select_one(
                "news", NewsArticle, columns=NEWS_COLUMNS, id=article_id, is_published=True,
            )
        except RallyDBNotFoundError:
            return None
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to fetch news article {article_id}") from exc

    @log_api_call
    async def list_all(self) -> list[NewsArticle]:
        try:
            return await self._db.select(
                "news", NewsArticle,
                columns=NEWS_COLUMNS,
                order=Order("created_at", ascending=False),
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch news") from exc

    @log_api_call
    async def create_article(self, payload: dict[str, Any]) -> NewsArticle:
        try:
            return await self._db.insert("news", NewsArticle, payload, columns=NEWS_COLUMNS)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create news") from exc

    @log_api_call
    async def update_article(self, article_id: str, changes: dict[str, Any]) -> NewsArticle:
        payload = {**changes, "updated_at": utc_now_iso()}
        try:
            rows = await self._db.update(
                "news", NewsArticle, payload, columns=NEWS_COLUMNS, id=article_id,
            )
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to update news {article_id}") from exc
        return first_or_not_found(rows, f"News article {article_id}")

    @log_api_call
    async def delete_article(self, article_id: str) -> None:
        try:
            await self._db.delete("news", id=article_id)
        except RallyDBError as exc:
            raise translate_error(exc, f"Failed to delete news {article_id}") from exc
