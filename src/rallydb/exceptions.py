"""Custom exceptions for the rallydb backend client."""

from __future__ import annotations


class RallyDBError(Exception):
    """Base exception for all rallydb client errors."""


class RallyDBTransportError(RallyDBError):
    """Raised when the backend cannot be reached or does not answer in time."""


class RallyDBConnectionError(RallyDBTransportError):
    """Raised when the client cannot connect to the backend."""


class RallyDBTimeoutError(RallyDBTransportError):
    """Raised when a request to the backend times out."""


class RallyDBAPIError(RallyDBError):
    """Raised when the backend returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str, code: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"HTTP {status_code}: {message}")


class RallyDBNotFoundError(RallyDBAPIError):
    """Raised when a single-row fetch matched no row."""


class RallyDBUnauthorizedError(RallyDBAPIError):
    """Raised when the caller lacks a valid session or row-level permission."""


class RallyDBValidationError(RallyDBError):
    """Raised when the backend rejects a payload or a response fails model validation."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(message)
