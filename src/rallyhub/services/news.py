"""News service: public feed, article pages and the editor's list."""

from __future__ import annotations

from typing import Any

from rallydb.models import NewsArticle

from ..api_logging import log_service_call
from ..constants import DEFAULT_LATEST_NEWS_LIMIT
from ..data._backend import utc_now_iso
from ..data.base import NewsRepository
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService


class NewsService(CachedService):

    def __init__(self, repo: NewsRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def latest(self, limit: int = DEFAULT_LATEST_NEWS_LIMIT) -> list[NewsArticle]:
        return await self._read(
            keys.news.latest(limit), "news.latest",
            lambda: self._repo.list_published(limit),
        )

    @log_service_call
    async def get_article(self, article_id: str) -> NewsArticle | None:
        """Published article by id; None for drafts and unknown ids."""
        return await self._read(
            keys.news.detail(article_id), "news.detail",
            lambda: self._repo.get_published(article_id),
        )

    @log_service_call
    async def list_all(self) -> list[NewsArticle]:
        return await self._read(keys.news.list(), "news.list", self._repo.list_all)

    def _after_write(self, mutation: str, article: NewsArticle, **ids: str) -> None:
        self._invalidate(mutation, **ids)
        # The public detail key only ever holds published articles.
        if article.is_published:
            self._seed(keys.news.detail(article.id), "news.detail", article)

    @log_service_call
    async def create_article(self, payload: dict[str, Any], author_id: str) -> NewsArticle:
        is_published = bool(payload.get("is_published", False))
        article = await self._repo.create_article({
            **payload,
            "is_published": is_published,
            "created_by": author_id,
            "published_at": utc_now_iso() if is_published else None,
        })
        self._after_write("create_news", article)
        return article

    @log_service_call
    async def update_article(
        self, current: NewsArticle, changes: dict[str, Any],
    ) -> NewsArticle:
        """Apply *changes*; the first publish stamps ``published_at``."""
        payload = dict(changes)
        if payload.get("is_published") and current.published_at is None:
            payload["published_at"] = utc_now_iso()
        article = await self._repo.update_article(current.id, payload)
        self._after_write("update_news", article, article_id=current.id)
        return article

    @log_service_call
    async def delete_article(self, article_id: str) -> None:
        await self._repo.delete_article(article_id)
        self._invalidate("delete_news", article_id=article_id)
        self._forget(keys.news.detail(article_id))
