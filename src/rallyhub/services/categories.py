"""Product category service."""

from __future__ import annotations

from typing import Any

from rallydb.models import ProductCategory

from ..api_logging import log_service_call
from ..data.base import CategoryRepository
from ..query import keys
from ..query.cache import QueryCache
from .base import CachedService


class CategoryService(CachedService):

    def __init__(self, repo: CategoryRepository, cache: QueryCache) -> None:
        super().__init__(cache)
        self._repo = repo

    @log_service_call
    async def list_categories(self) -> list[ProductCategory]:
        return await self._read(
            keys.categories.list(), "categories.list", self._repo.list_categories,
        )

    @log_service_call
    async def create_category(self, payload: dict[str, Any]) -> ProductCategory:
        category = await self._repo.create_category(payload)
        self._invalidate("create_category")
        return category
