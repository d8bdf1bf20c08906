"""FastAPI app for the server-side admin, auth and rally status endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from rallydb import AsyncRallyDBClient

from .. import config
from ..data import Repositories, get_repositories
from ..query.cache import QueryCache
from .routes import admin_router, auth_router, health_router, rallies_router


def create_app(repositories: Repositories | None = None) -> FastAPI:
    """Build the app; without *repositories* it connects with the service-role key on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if repositories is not None:
            yield
            return
        async with AsyncRallyDBClient(
            config.BACKEND_URL,
            config.BACKEND_SERVICE_ROLE_KEY,
            timeout=config.REQUEST_TIMEOUT,
        ) as client:
            app.state.repositories = get_repositories(client)
            yield

    app = FastAPI(title="RallyHub API", lifespan=lifespan)
    app.state.cache = QueryCache()
    if repositories is not None:
        app.state.repositories = repositories
    app.include_router(health_router)
    app.include_router(admin_router)
    app.include_router(auth_router)
    app.include_router(rallies_router)
    return app


app = create_app()
