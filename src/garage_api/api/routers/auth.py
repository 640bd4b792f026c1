"""
garage_api.api.routers.auth

Registration, login and "who am I" endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import db_session, settings_dep
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.schemas import LoginRequest, RegisterRequest, TokenResponse, UserOut
from garage_api.services.auth_service import AuthService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])


def auth_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AuthService:
    return AuthService(session=session, settings=settings)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, svc: AuthService = Depends(auth_service)) -> UserOut:
    return UserOut.model_validate(await svc.register(body))


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(auth_service)) -> TokenResponse:
    user, token = await svc.login(body)
    return TokenResponse(
        access_token=token,
        expires_in=int(svc.token_ttl.total_seconds()),
        user=UserOut.model_validate(user),
    )


@router.get("/me", response_model=UserOut)
async def me(
    principal: Principal = Depends(get_principal),
    svc: AuthService = Depends(auth_service),
) -> UserOut:
    return UserOut.model_validate(await svc.me(principal))
