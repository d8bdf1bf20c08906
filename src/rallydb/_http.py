"""Low-level HTTP transport layer wrapping httpx."""

from __future__ import annotations

from typing import Any

import httpx

from rallydb.exceptions import (
    RallyDBAPIError,
    RallyDBConnectionError,
    RallyDBNotFoundError,
    RallyDBTimeoutError,
    RallyDBUnauthorizedError,
    RallyDBValidationError,
)

DEFAULT_TIMEOUT = 30.0

REST_PREFIX = "/rest/v1"
AUTH_PREFIX = "/auth/v1"

# PostgREST answers 406 with this code when a single-object request matched no row.
_NO_ROWS_CODE = "PGRST116"
_PERMISSION_DENIED_CODE = "42501"
_VALIDATION_STATUSES = frozenset({400, 409, 422})
# SQLSTATE classes 22 (data exception) and 23 (integrity constraint violation).
_VALIDATION_SQLSTATE_CLASSES = ("22", "23")
# Auth service codes for a refused email/password pair.
_REJECTED_LOGIN_CODES = frozenset({"invalid_grant", "invalid_credentials"})


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    """Extract (message, code) from a PostgREST or auth error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text, None
    if not isinstance(body, dict):
        return response.text, None
    if "error_description" in body:
        # OAuth-style pair: ``error`` carries the code.
        message = body["error_description"]
        code = body.get("error_code") or body.get("error")
    else:
        message = body.get("message") or body.get("msg") or body.get("error") or response.text
        # Newer auth bodies put the HTTP status in ``code`` and the reason in ``error_code``.
        code = body.get("error_code") or body.get("code")
    return str(message), str(code) if code is not None else None


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    status = response.status_code
    message, code = _error_details(response)
    if status == 404 or code == _NO_ROWS_CODE:
        raise RallyDBNotFoundError(status_code=status, message=message, code=code)
    if status in (401, 403) or code == _PERMISSION_DENIED_CODE or code in _REJECTED_LOGIN_CODES:
        raise RallyDBUnauthorizedError(status_code=status, message=message, code=code)
    if status in _VALIDATION_STATUSES or (code is not None and code[:2] in _VALIDATION_SQLSTATE_CLASSES):
        raise RallyDBValidationError(message, status_code=status, code=code)
    raise RallyDBAPIError(status_code=status, message=message, code=code)


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return parsed JSON (None for empty bodies)."""
    _raise_for_status(response)
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


def _parse_content_range(value: str | None) -> int:
    """Return the total from a ``Content-Range`` header such as ``0-9/42``."""
    if not value or "/" not in value:
        raise RallyDBValidationError(f"Missing row count in Content-Range: {value!r}")
    total = value.rsplit("/", 1)[1]
    if total == "*":
        raise RallyDBValidationError("Backend did not return an exact row count")
    return int(total)


class AsyncTransport:
    """Asynchronous HTTP transport using httpx.AsyncClient.

    Every request carries the project ``apikey`` header. The bearer token is
    the signed-in user's access token when one is set, otherwise the key.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        access_token: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._access_token = access_token
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", "apikey": api_key},
        )

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token

    def _headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._access_token or self._api_key}"}
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                endpoint,
                params=params,
                json=json,
                headers=self._headers(headers),
            )
        except httpx.ConnectError as exc:
            raise RallyDBConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise RallyDBTimeoutError(str(exc)) from exc

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Perform a request and return parsed JSON."""
        response = await self._send(method, endpoint, params=params, json=json, headers=headers)
        return _handle_response(response)

    async def count(self, endpoint: str, params: list[tuple[str, str]]) -> int:
        """Perform a HEAD request asking for an exact row count."""
        response = await self._send(
            "HEAD", endpoint, params=params, headers={"Prefer": "count=exact"},
        )
        _raise_for_status(response)
        return _parse_content_range(response.headers.get("Content-Range"))

    async def close(self) -> None:
        await self._client.aclose()
