"""
garage_api.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal` backed by a live user row.
- Collapse every token failure into one `Unauthenticated` outcome.
- Enforce route-level role gates via reusable dependency factories.
"""

from __future__ import annotations

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import db_session, settings_dep
from garage_api.auth.jwt import JwtConfig, TokenError, verify
from garage_api.auth.models import Principal, Role
from garage_api.db.repositories.users import UserRepo
from garage_api.errors import Forbidden, Unauthenticated
from garage_api.observability.logging import get_logger
from garage_api.services.base import store_deadline
from garage_api.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        log.warning("auth_failed", reason="missing_bearer_token")
        raise Unauthenticated()

    try:
        claims = verify(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except TokenError as e:
        # The reason stays server-side; every failure looks the same to the caller.
        log.warning("auth_failed", reason=e.reason, error=str(e))
        raise Unauthenticated() from e

    # Role and active flag come from the store, not from the token.
    async with store_deadline(session, settings, "user"):
        user = await UserRepo(session).get(claims.user_id)
    if user is None:
        log.warning("auth_failed", reason="unknown_user", user_id=str(claims.user_id))
        raise Unauthenticated()

    structlog.contextvars.bind_contextvars(principal_id=str(user.id))
    return Principal(id=user.id, role=user.role, active=user.is_active, email=user.email)


def require_roles(*required: Role):
    required_set = frozenset(required)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.active:
            raise Forbidden("Account is inactive")
        # Authz: admin passes every role gate.
        if principal.is_admin:
            return principal
        if principal.role not in required_set:
            raise Forbidden("Insufficient role")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# Inactive users still authenticate; the policy denies them every operation.
