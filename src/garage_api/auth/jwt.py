"""
garage_api.auth.jwt

JWT issuing and verification helpers.

Responsibilities:
- Issue access tokens on login.
- Verify tokens with a pinned symmetric algorithm and strict registered claims.
- Decode the identity claims into one typed `Claims` value.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import (
    DecodeError,
    ExpiredSignatureError,
    InvalidAlgorithmError,
    InvalidSignatureError,
    InvalidTokenError,
)

from garage_api.auth.models import Role
from garage_api.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


@dataclass(frozen=True, slots=True)
class Claims:
    user_id: uuid.UUID
    email: str | None = None
    role: Role | None = None


class TokenError(Exception):
    reason = "invalid_token"


class InvalidSignature(TokenError):
    reason = "invalid_signature"


class TokenExpired(TokenError):
    reason = "token_expired"


class MalformedToken(TokenError):
    reason = "malformed_token"


class MissingIdentifier(TokenError):
    reason = "missing_identifier"


def issue_token(
    *,
    cfg: JwtConfig,
    user_id: uuid.UUID,
    email: str | None,
    role: str,
    ttl: timedelta = timedelta(hours=24),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": str(user_id),
        "userID": str(user_id),
        "role": str(role),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def verify(*, cfg: JwtConfig, token: str) -> Claims:
    if not token:
        raise MalformedToken("empty token")
    try:
        # Only cfg.alg is accepted; "none" and asymmetric algorithms fail here.
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp"]},
        )
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except (InvalidSignatureError, InvalidAlgorithmError) as e:
        raise InvalidSignature(str(e)) from e
    except (DecodeError, InvalidTokenError) as e:
        raise MalformedToken(str(e)) from e

    return _claims_from_payload(payload)


def _claims_from_payload(payload: dict[str, Any]) -> Claims:
    raw_id = payload.get("userID", payload.get("sub"))
    if not isinstance(raw_id, str) or not raw_id:
        raise MissingIdentifier("no userID/sub claim")
    try:
        user_id = uuid.UUID(raw_id)
    except ValueError as e:
        raise MissingIdentifier(f"identifier is not a uuid: {raw_id!r}") from e

    email = payload.get("email")
    if email is not None and not isinstance(email, str):
        raise MalformedToken("email claim is not a string")

    raw_role = payload.get("role")
    role: Role | None = None
    if raw_role is not None:
        try:
            role = Role(raw_role)
        except ValueError as e:
            raise MalformedToken(f"unknown role claim: {raw_role!r}") from e

    return Claims(user_id=user_id, email=email, role=role)


# --- Module Notes -----------------------------------------------------------
# Callers must collapse every TokenError into one "unauthenticated" response;
# `reason` is for server-side logs only (see `auth.deps.get_principal`).
