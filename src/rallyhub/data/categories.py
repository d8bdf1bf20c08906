"""Backend repository for product categories."""

from __future__ import annotations

from typing import Any

from rallydb import Order, RallyDBError
from rallydb.models import ProductCategory

from ..api_logging import log_api_call
from ._backend import BackendRepository
from .base import CategoryRepository
from .errors import translate_error


class BackendCategoryRepository(BackendRepository, CategoryRepository):

    @log_api_call
    async def list_categories(self) -> list[ProductCategory]:
        try:
            return await self._db.select(
                "product_categories", ProductCategory,
                order=[Order("sort_order"), Order("name")],
                is_active=True,
            )
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch product categories") from exc

    @log_api_call
    async def create_category(self, payload: dict[str, Any]) -> ProductCategory:
        try:
            return await self._db.insert("product_categories", ProductCategory, payload)
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to create product category") from exc
