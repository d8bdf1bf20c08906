"""Backend-agnostic data access errors. Callers catch only these."""

from __future__ import annotations

from rallydb.exceptions import (
    RallyDBError,
    RallyDBNotFoundError,
    RallyDBTransportError,
    RallyDBUnauthorizedError,
    RallyDBValidationError,
)

from ..constants import GENERIC_FAILURE_MESSAGE


class DataError(Exception):
    """Base data access error; ``backend_message`` is what the backend said, if anything."""

    def __init__(self, message: str, backend_message: str | None = None) -> None:
        super().__init__(message)
        self.backend_message = backend_message


class NotFound(DataError):
    """No row matched."""


class ValidationFailure(DataError):
    """The backend rejected the payload, or returned a shape we cannot decode."""


class Unauthorized(DataError):
    """No session, or the session may not touch these rows."""


class TransportFailure(DataError):
    """The backend was unreachable or did not answer in time."""


class UnknownDataError(DataError):
    """Unexpected backend error shape."""


def translate_error(exc: RallyDBError, context: str) -> DataError:
    """Map a backend client error onto the data access taxonomy.

    Usage:
        except RallyDBError as exc:
            raise translate_error(exc, "Failed to fetch rallies") from exc
    """
    backend_message = getattr(exc, "message", None) or str(exc) or None
    message = f"{context}: {exc}"
    if isinstance(exc, RallyDBNotFoundError):
        return NotFound(message, backend_message)
    if isinstance(exc, RallyDBUnauthorizedError):
        return Unauthorized(message, backend_message)
    if isinstance(exc, RallyDBValidationError):
        return ValidationFailure(message, backend_message)
    if isinstance(exc, RallyDBTransportError):
        return TransportFailure(message, backend_message)
    return UnknownDataError(message, backend_message)


def user_message(exc: Exception, fallback: str = GENERIC_FAILURE_MESSAGE) -> str:
    """Inline failure text: the backend's message when there is one."""
    if isinstance(exc, DataError) and exc.backend_message:
        return exc.backend_message
    return fallback
