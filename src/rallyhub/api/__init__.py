"""HTTP surface: admin, auth and rally status endpoints."""

from .main import create_app

__all__ = ["create_app"]
