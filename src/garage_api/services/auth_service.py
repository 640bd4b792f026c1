"""
garage_api.services.auth_service

Self-registration and login.

Responsibilities:
- Register client accounts (never staff).
- Exchange email + password for an access token.
- Return the authenticated principal's own account.
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.jwt import JwtConfig, issue_token
from garage_api.auth.models import Principal, Role
from garage_api.auth.passwords import hash_password, verify_password
from garage_api.db.models import User
from garage_api.db.repositories.users import UserRepo
from garage_api.errors import AlreadyExists, InvalidInput, Unauthenticated
from garage_api.observability.logging import get_logger
from garage_api.schemas import LoginRequest, RegisterRequest
from garage_api.services.base import store_deadline, utcnow
from garage_api.services.users import check_password
from garage_api.services.validation import is_valid_email, normalize_email
from garage_api.settings import Settings

log = get_logger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


class AuthService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(hours=self._settings.jwt_expire_hours)

    async def register(self, data: RegisterRequest) -> User:
        email = normalize_email(data.email)
        if not is_valid_email(email):
            raise InvalidInput("email is not a valid address")
        check_password(data.password)

        async with store_deadline(self._session, self._settings, "user"):
            if await self._users.get_by_email(email) is not None:
                raise AlreadyExists("User with this email already exists")
            now = utcnow()
            user = await self._users.create(
                User(
                    email=email,
                    password_hash=hash_password(data.password),
                    first_name=data.first_name,
                    last_name=data.last_name,
                    role=Role.client,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
            )
            await self._session.commit()
        log.info("user_registered", id=str(user.id))
        return user

    async def login(self, data: LoginRequest) -> tuple[User, str]:
        async with store_deadline(self._session, self._settings, "user"):
            user = await self._users.get_by_email(data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            log.warning("login_failed", reason="bad_credentials")
            raise Unauthenticated(_BAD_CREDENTIALS)
        if not user.is_active:
            log.warning("login_failed", reason="inactive", id=str(user.id))
            raise Unauthenticated(_BAD_CREDENTIALS)

        token = issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            user_id=user.id,
            email=user.email,
            role=user.role,
            ttl=self.token_ttl,
        )
        log.info("user_logged_in", id=str(user.id))
        return user, token

    async def me(self, principal: Principal) -> User:
        async with store_deadline(self._session, self._settings, "user"):
            user = await self._users.get(principal.id)
        if user is None:
            raise Unauthenticated()
        return user
