"""
garage_api.services.users

User account administration.

Responsibilities:
- Let staff create, list, update and deactivate login accounts.
- Keep the admin role in the hands of admins.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal, Role
from garage_api.auth.passwords import MIN_PASSWORD_LENGTH, hash_password
from garage_api.auth.policy import AccessRules, Operation
from garage_api.db.models import User
from garage_api.db.repositories.users import UserRepo
from garage_api.errors import Forbidden, InvalidInput
from garage_api.schemas import UserCreate, UserUpdate
from garage_api.services.base import ResourceService
from garage_api.services.validation import is_valid_email, normalize_email, raise_if
from garage_api.settings import Settings

USER_RULES = AccessRules(
    employee_ops=frozenset(),
    client_ops=frozenset({Operation.read}),
)


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"password must be at least {MIN_PASSWORD_LENGTH} characters")


class UserService(ResourceService[User, UserCreate | UserUpdate]):
    entity = "user"
    rules = USER_RULES
    immutable_fields = ("email", "password_hash")

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._users = UserRepo(session)
        super().__init__(session=session, settings=settings, repo=self._users)

    def _build(self, principal: Principal, data: UserCreate | UserUpdate) -> User:
        if isinstance(data, UserCreate):
            check_password(data.password)
            return User(
                email=normalize_email(data.email),
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                role=data.role,
                is_active=True,
            )
        return User(
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role,
            is_active=data.is_active,
        )

    async def _owner_id(self, record: User) -> uuid.UUID | None:
        return record.id

    async def _validate(self, principal: Principal, record: User) -> None:
        if record.role == Role.admin and not principal.is_admin:
            raise Forbidden("Only admins can grant the admin role")
        problems = []
        if not is_valid_email(record.email or ""):
            problems.append("email is not a valid address")
        raise_if(problems)

    def _unique_keys(self, record: User) -> list[dict[str, Any]]:
        return [{"email": record.email}]

    async def _guard_admin_target(self, principal: Principal, record_id: uuid.UUID) -> None:
        if principal.is_admin:
            return
        async with self._deadline():
            target = await self._users.get(record_id)
        if target is not None and target.role == Role.admin:
            raise Forbidden("Only admins can modify admin accounts")

    async def create(self, principal: Principal, data: UserCreate | UserUpdate) -> User:
        # Authorized before `_build` hashes the password.
        self._require(principal, Operation.create, None)
        return await super().create(principal, data)

    async def update(
        self, principal: Principal, record_id: uuid.UUID, data: UserCreate | UserUpdate
    ) -> User:
        await self._guard_admin_target(principal, record_id)
        return await super().update(principal, record_id, data)

    async def delete(self, principal: Principal, record_id: uuid.UUID) -> None:
        await self._guard_admin_target(principal, record_id)
        await super().delete(principal, record_id)


# --- Module Notes -----------------------------------------------------------
# Self-registration lives in `services.auth_service` and always yields a client.
