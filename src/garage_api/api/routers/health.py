"""
garage_api.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import cache_from_app, db_session
from garage_api.cache import Cache

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    cache: Cache = Depends(cache_from_app),
) -> dict[str, str]:
    # Readiness: the DB must answer; a missing cache only degrades reads.
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "cache": "ok" if await cache.ping() else "degraded"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
