"""
tests.conftest

Shared fixtures: a fresh sqlite database per test, seeded users of every role,
and an ASGI client over a fully started app.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from garage_api.api.app import create_app
from garage_api.auth.jwt import JwtConfig, issue_token
from garage_api.auth.models import Principal, Role
from garage_api.auth.passwords import hash_password
from garage_api.db.init_db import init_db
from garage_api.db.models import User
from garage_api.db.repositories.users import UserRepo
from garage_api.db.session import create_engine, create_sessionmaker
from garage_api.settings import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"
PASSWORD = "correct-horse-battery"


@dataclass(frozen=True)
class People:
    admin: Principal
    manager: Principal
    employee: Principal
    client: Principal
    other_client: Principal


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'garage.db'}",
        jwt_secret=TEST_SECRET,
        redis_url=None,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with create_sessionmaker(engine)() as session:
        yield session


async def add_user(session: AsyncSession, role: Role, email: str) -> Principal:
    user = await UserRepo(session).create(
        User(
            email=email,
            password_hash=hash_password(PASSWORD),
            first_name=role.value.capitalize(),
            last_name="Test",
            role=role,
            is_active=True,
        )
    )
    await session.commit()
    return Principal(id=user.id, role=user.role, active=True, email=user.email)


async def seed_people(session: AsyncSession) -> People:
    return People(
        admin=await add_user(session, Role.admin, "admin@garage.test"),
        manager=await add_user(session, Role.manager, "manager@garage.test"),
        employee=await add_user(session, Role.employee, "mechanic@garage.test"),
        client=await add_user(session, Role.client, "ann@example.com"),
        other_client=await add_user(session, Role.client, "bob@example.com"),
    )


@pytest_asyncio.fixture
async def people(session: AsyncSession) -> People:
    return await seed_people(session)


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run the lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api_people(app: FastAPI) -> People:
    async with app.state.sessionmaker() as session:
        return await seed_people(session)


def bearer(settings: Settings, principal: Principal, ttl: timedelta = timedelta(hours=1)) -> dict:
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        user_id=principal.id,
        email=principal.email,
        role=principal.role,
        ttl=ttl,
    )
    return {"Authorization": f"Bearer {token}"}
