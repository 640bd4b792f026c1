"""
garage_api.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed an initial admin account when one is configured.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from garage_api.auth.models import Role
from garage_api.auth.passwords import hash_password
from garage_api.db.base import Base
from garage_api.db.models import User
from garage_api.db.repositories.users import UserRepo
from garage_api.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production relies on Alembic migrations.
    """

    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_admin(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str,
    password: str,
) -> None:
    # Without a first admin nobody could grant staff roles (registration creates clients).
    email = email.strip().lower()
    async with session_factory() as session:
        users = UserRepo(session)
        if await users.get_by_email(email) is not None:
            return
        await users.create(
            User(
                email=email,
                password_hash=hash_password(password),
                first_name="Admin",
                last_name="",
                role=Role.admin,
                is_active=True,
            )
        )
        await session.commit()
    log.info("bootstrap_admin_created", email=email)


# --- Module Notes -----------------------------------------------------------
# `create_all` is not used in prod; production workflows run Alembic migrations.
