"""
garage_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the cache.
- Encapsulate app.state access patterns (settings/sessionmaker/cache).
- Parse shared query parameters (pagination).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from garage_api.cache import Cache
from garage_api.services.base import MAX_PAGE_SIZE
from garage_api.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app's own settings, so tests can run apps with different configs side by side.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created by the lifespan in `garage_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def cache_from_app(request: Request) -> Cache:
    return request.app.state.cache  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


@dataclass(frozen=True, slots=True)
class Page:
    limit: int
    offset: int


def page_params(
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
) -> Page:
    return Page(limit=limit, offset=offset)


# --- Module Notes -----------------------------------------------------------
# Service factories live next to the routers that use them (`api.routers.*`).
