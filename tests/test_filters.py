"""Tests for the filter builder."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from rallydb._filters import Filter, Order, build_modifiers, build_query_params


class TestFilter:
    def test_gt(self) -> None:
        f = Filter(gt=5)
        assert f.to_params("round_number") == [("round_number", "gt.5")]

    def test_gte(self) -> None:
        f = Filter(gte=10)
        assert f.to_params("total_points") == [("total_points", "gte.10")]

    def test_lt(self) -> None:
        f = Filter(lt=100)
        assert f.to_params("length_km") == [("length_km", "lt.100")]

    def test_range(self) -> None:
        f = Filter(gte=5, lte=10)
        params = f.to_params("round_number")
        assert ("round_number", "gte.5") in params
        assert ("round_number", "lte.10") in params
        assert len(params) == 2

    def test_neq(self) -> None:
        assert Filter(neq="team").to_params("championship_type") == [
            ("championship_type", "neq.team"),
        ]

    def test_in(self) -> None:
        f = Filter(in_=("r-1", "r-2"))
        assert f.to_params("rally_id") == [("rally_id", "in.(r-1,r-2)")]

    def test_is_null(self) -> None:
        assert Filter(is_null=True).to_params("user_id") == [("user_id", "is.null")]
        assert Filter(is_null=False).to_params("user_id") == [("user_id", "not.is.null")]

    def test_datetime_value(self) -> None:
        when = datetime(2025, 7, 18, 18, 0, tzinfo=UTC)
        assert Filter(gte=when).to_params("expires_at") == [
            ("expires_at", "gte.2025-07-18T18:00:00+00:00"),
        ]

    def test_no_operators(self) -> None:
        f = Filter()
        assert f.to_params("key") == []

    def test_frozen(self) -> None:
        """Filter should be immutable."""
        f = Filter(gte=5)
        with pytest.raises(AttributeError):
            f.gte = 10  # type: ignore[misc]


class TestBuildQueryParams:
    def test_simple_equality(self) -> None:
        params = build_query_params(status="approved", is_active=True)
        assert params == [("status", "eq.approved"), ("is_active", "eq.true")]

    def test_none_values_skipped(self) -> None:
        params = build_query_params(status=None, game_id="g-1")
        assert params == [("game_id", "eq.g-1")]

    def test_mixed_with_filter(self) -> None:
        params = build_query_params(token="abc", used=False, expires_at=Filter(gte="2025-01-01"))
        assert params == [
            ("token", "eq.abc"),
            ("used", "eq.false"),
            ("expires_at", "gte.2025-01-01"),
        ]

    def test_empty(self) -> None:
        assert build_query_params() == []


class TestBuildModifiers:
    def test_defaults(self) -> None:
        assert build_modifiers() == [("select", "*")]

    def test_order_limit_offset(self) -> None:
        params = build_modifiers(
            "id,name", Order("created_at", ascending=False), limit=10, offset=20,
        )
        assert params == [
            ("select", "id,name"),
            ("order", "created_at.desc"),
            ("limit", "10"),
            ("offset", "20"),
        ]

    def test_multiple_orders(self) -> None:
        params = build_modifiers(order=[Order("sort_order"), Order("name")])
        assert ("order", "sort_order.asc,name.asc") in params
