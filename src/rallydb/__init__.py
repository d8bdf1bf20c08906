"""rallydb — Typed async client for the hosted rally backend."""

from rallydb._filters import Filter, Order
from rallydb.client import AsyncRallyDBClient
from rallydb.exceptions import (
    RallyDBAPIError,
    RallyDBConnectionError,
    RallyDBError,
    RallyDBNotFoundError,
    RallyDBTimeoutError,
    RallyDBTransportError,
    RallyDBUnauthorizedError,
    RallyDBValidationError,
)

__all__ = [
    "AsyncRallyDBClient",
    "Filter",
    "Order",
    "RallyDBAPIError",
    "RallyDBConnectionError",
    "RallyDBError",
    "RallyDBNotFoundError",
    "RallyDBTimeoutError",
    "RallyDBTransportError",
    "RallyDBUnauthorizedError",
    "RallyDBValidationError",
]

__version__ = "0.1.0"
