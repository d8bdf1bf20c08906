"""Public client class for the hosted rally backend."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import TypeAdapter

from rallydb._filters import Order, build_modifiers, build_query_params
from rallydb._http import AUTH_PREFIX, DEFAULT_TIMEOUT, REST_PREFIX, AsyncTransport
from rallydb.exceptions import RallyDBValidationError
from rallydb.models.user import AuthSession, AuthUser

T = TypeVar("T")

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _validate_list(model_type: type[T], data: Any) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data if data is not None else [])
    except Exception as exc:
        raise RallyDBValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


def _validate_one(model_type: type[T], data: Any) -> T:
    """Validate a single dict against a Pydantic model."""
    try:
        return TypeAdapter(model_type).validate_python(data)
    except Exception as exc:
        raise RallyDBValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


class AsyncRallyDBClient:
    """Asynchronous client for the backend's table and auth APIs.

    Usage:
        async with AsyncRallyDBClient(url, anon_key) as db:
            rallies = await db.select("rallies", Rally, status="upcoming")

    Keyword filters follow ``build_query_params``: plain values are equality
    filters, ``Filter`` instances map to comparison operators.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        access_token: str | None = None,
    ) -> None:
        self._transport = AsyncTransport(
            base_url=base_url, api_key=api_key, timeout=timeout, access_token=access_token,
        )

    async def __aenter__(self) -> AsyncRallyDBClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection."""
        await self._transport.close()

    @property
    def access_token(self) -> str | None:
        return self._transport.access_token

    def set_access_token(self, token: str | None) -> None:
        """Send *token* as the bearer on subsequent requests (None reverts to the API key)."""
        self._transport.set_access_token(token)

    # ── Tables ─────────────────────────────────────────────────

    async def select(
        self,
        table: str,
        model: type[T],
        *,
        columns: str = "*",
        order: Order | list[Order] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        **filters: Any,
    ) -> list[T]:
        """Select matching rows of *table*."""
        params = build_modifiers(columns, order, limit, offset) + build_query_params(**filters)
        data = await self._transport.request("GET", f"{REST_PREFIX}/{table}", params=params)
        return _validate_list(model, data)

    async def select_one(
        self,
        table: str,
        model: type[T],
        *,
        columns: str = "*",
        **filters: Any,
    ) -> T:
        """Select exactly one row; raises ``RallyDBNotFoundError`` when none matches."""
        params = build_modifiers(columns) + build_query_params(**filters)
        data = await self._transport.request(
            "GET", f"{REST_PREFIX}/{table}", params=params, headers={"Accept": _SINGLE_OBJECT},
        )
        return _validate_one(model, data)

    async def insert(
        self,
        table: str,
        model: type[T],
        payload: dict[str, Any],
        *,
        columns: str = "*",
    ) -> T:
        """Insert one row and return it as stored."""
        data = await self._transport.request(
            "POST",
            f"{REST_PREFIX}/{table}",
            params=build_modifiers(columns),
            json=payload,
            headers={"Prefer": "return=representation", "Accept": _SINGLE_OBJECT},
        )
        return _validate_one(model, data)

    async def upsert(
        self,
        table: str,
        model: type[T],
        payload: dict[str, Any],
        *,
        on_conflict: str,
        columns: str = "*",
    ) -> T:
        """Insert one row, or merge *payload* into the row it collides with on *on_conflict*."""
        data = await self._transport.request(
            "POST",
            f"{REST_PREFIX}/{table}",
            params=build_modifiers(columns) + [("on_conflict", on_conflict)],
            json=payload,
            headers={
                "Prefer": "resolution=merge-duplicates,return=representation",
                "Accept": _SINGLE_OBJECT,
            },
        )
        return _validate_one(model, data)

    async def update(
        self,
        table: str,
        model: type[T],
        payload: dict[str, Any],
        *,
        columns: str = "*",
        **filters: Any,
    ) -> list[T]:
        """Update matching rows and return them as stored."""
        if not filters:
            raise ValueError("update() requires at least one filter")
        params = build_modifiers(columns) + build_query_params(**filters)
        data = await self._transport.request(
            "PATCH",
            f"{REST_PREFIX}/{table}",
            params=params,
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        return _validate_list(model, data)

    async def delete(self, table: str, **filters: Any) -> None:
        """Delete matching rows."""
        if not filters:
            raise ValueError("delete() requires at least one filter")
        await self._transport.request(
            "DELETE", f"{REST_PREFIX}/{table}", params=build_query_params(**filters),
        )

    async def count(self, table: str, **filters: Any) -> int:
        """Return the exact number of matching rows."""
        params = [("select", "*")] + build_query_params(**filters)
        return await self._transport.count(f"{REST_PREFIX}/{table}", params)

    # ── Auth ───────────────────────────────────────────────────

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session and use its access token from now on."""
        data = await self._transport.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params=[("grant_type", "password")],
            json={"email": email, "password": password},
        )
        session = _validate_one(AuthSession, data)
        self.set_access_token(session.access_token)
        return session

    async def get_user(self) -> AuthUser:
        """Return the identity behind the current access token."""
        data = await self._transport.request("GET", f"{AUTH_PREFIX}/user")
        return _validate_one(AuthUser, data)

    async def sign_out(self) -> None:
        """Revoke the current session and fall back to the API key."""
        if self.access_token is None:
            return
        try:
            await self._transport.request("POST", f"{AUTH_PREFIX}/logout")
        finally:
            self.set_access_token(None)
