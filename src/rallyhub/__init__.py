"""rallyhub: data access, query caching and services for the rally management app."""

from .data import DataError, Repositories, get_repositories
from .query import QueryCache, QueryScope
from .services import Services, build_services
from .session import SessionContext

__version__ = "0.1.0"

__all__ = [
    "DataError",
    "QueryCache",
    "QueryScope",
    "Repositories",
    "Services",
    "SessionContext",
    "build_services",
    "get_repositories",
]
