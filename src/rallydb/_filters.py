"""Query filter builder for PostgREST-style comparison operators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

Scalar = int | float | str | bool | date | datetime


def _format_value(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Filter:
    """Represents a comparison filter for table query parameters.

    Usage:
        # Greater than or equal
        Filter(gte=5)  # produces: column=gte.5

        # Range filter
        Filter(gte=5, lte=10)  # produces: column=gte.5&column=lte.10

        # Membership
        Filter(in_=("a", "b"))  # produces: column=in.(a,b)

        # Null checks
        Filter(is_null=True)  # produces: column=is.null
    """

    eq: Scalar | None = None
    neq: Scalar | None = None
    gt: Scalar | None = None
    gte: Scalar | None = None
    lt: Scalar | None = None
    lte: Scalar | None = None
    in_: tuple[Scalar, ...] | None = None
    ilike: str | None = None
    is_null: bool | None = None

    def to_params(self, key: str) -> list[tuple[str, str]]:
        """Convert this filter to a list of (column, operator.value) pairs."""
        params: list[tuple[str, str]] = []
        for op in ("eq", "neq", "gt", "gte", "lt", "lte"):
            value = getattr(self, op)
            if value is not None:
                params.append((key, f"{op}.{_format_value(value)}"))
        if self.in_ is not None:
            joined = ",".join(_format_value(v) for v in self.in_)
            params.append((key, f"in.({joined})"))
        if self.ilike is not None:
            params.append((key, f"ilike.{self.ilike}"))
        if self.is_null is not None:
            params.append((key, "is.null" if self.is_null else "not.is.null"))
        return params


@dataclass(frozen=True)
class Order:
    """Sort specification, e.g. ``Order("created_at", ascending=False)``."""

    column: str
    ascending: bool = True

    def to_param(self) -> str:
        return f"{self.column}.{'asc' if self.ascending else 'desc'}"


def build_query_params(**kwargs: Any) -> list[tuple[str, str]]:
    """Build a list of query parameter tuples from keyword arguments.

    Plain values become equality filters. Filter instances become comparison operators.

    Args:
        **kwargs: Keyword arguments where keys are column names and values are
                  either plain values (for equality) or Filter instances (for comparisons).

    Returns:
        List of (key, value) tuples suitable for httpx params.
    """
    params: list[tuple[str, str]] = []
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, Filter):
            params.extend(value.to_params(key))
        else:
            params.append((key, f"eq.{_format_value(value)}"))
    return params


def build_modifiers(
    columns: str = "*",
    order: Order | list[Order] | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> list[tuple[str, str]]:
    """Build the select/order/limit/offset parameters of a table query."""
    params: list[tuple[str, str]] = [("select", columns)]
    if order is not None:
        orders = order if isinstance(order, list) else [order]
        params.append(("order", ",".join(o.to_param() for o in orders)))
    if limit is not None:
        params.append(("limit", str(limit)))
    if offset is not None:
        params.append(("offset", str(offset)))
    return params
