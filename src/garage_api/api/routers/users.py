"""
garage_api.api.routers.users

User account administration endpoints (`/v1/users`).

Responsibilities:
- Staff-facing account management; self-registration lives under `/v1/auth`.
- Gate account creation to managers at the route level (admin always passes).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, db_session, page_params, settings_dep
from garage_api.auth.deps import get_principal, require_roles
from garage_api.auth.models import Principal, Role
from garage_api.schemas import UserCreate, UserOut, UserUpdate
from garage_api.services.users import UserService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/users", tags=["users"])


def user_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserService:
    return UserService(session=session, settings=settings)


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(Role.manager))],
)
async def create_user(
    body: UserCreate,
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(user_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[UserOut])
async def list_users(
    role: Role | None = None,
    is_active: bool | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(user_service),
):
    return await svc.list(
        principal, limit=page.limit, offset=page.offset, role=role, is_active=is_active
    )


@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(user_service),
):
    return await svc.get(principal, user_id)


@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(user_service),
):
    return await svc.update(principal, user_id, body)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: UserService = Depends(user_service),
) -> Response:
    await svc.delete(principal, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
