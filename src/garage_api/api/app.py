"""
garage_api.api.app

FastAPI app factory for the Garage API service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory, cache).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from garage_api import __version__
from garage_api.api.errors import install_exception_handlers
from garage_api.api.routers.appointments import router as appointments_router
from garage_api.api.routers.auth import router as auth_router
from garage_api.api.routers.cars import router as cars_router
from garage_api.api.routers.clients import router as clients_router
from garage_api.api.routers.employees import router as employees_router
from garage_api.api.routers.health import router as health_router
from garage_api.api.routers.repairs import router as repairs_router
from garage_api.api.routers.users import router as users_router
from garage_api.cache import Cache, NullCache, RedisCache
from garage_api.db.init_db import ensure_admin, init_db
from garage_api.db.session import create_engine, create_sessionmaker
from garage_api.observability.logging import configure_logging, get_logger
from garage_api.observability.middleware import RequestContextMiddleware
from garage_api.settings import DEFAULT_JWT_SECRET, Settings

log = get_logger(__name__)


async def _connect_cache(settings: Settings) -> Cache:
    if not settings.redis_url:
        return NullCache()
    cache = RedisCache.from_url(settings.redis_url)
    if await cache.ping():
        log.info("cache_connected")
        return cache
    log.warning("cache_unavailable", detail="continuing without cache")
    await cache.close()
    return NullCache()


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        if settings.env == "prod" and settings.jwt_secret == DEFAULT_JWT_SECRET:
            log.warning("insecure_jwt_secret", detail="set GARAGE_JWT_SECRET in production")

        # Shared infrastructure lives on app.state; routers reach it via `api.deps`.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.cache = await _connect_cache(settings)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        if settings.bootstrap_admin_email and settings.bootstrap_admin_password:
            await ensure_admin(
                app.state.sessionmaker,
                email=settings.bootstrap_admin_email,
                password=settings.bootstrap_admin_password,
            )
        try:
            yield
        finally:
            await app.state.cache.close()
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Garage API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    install_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(cars_router)
    app.include_router(repairs_router)
    app.include_router(appointments_router)
    app.include_router(clients_router)
    app.include_router(employees_router)
    app.include_router(users_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business rules live in `garage_api.services`.
