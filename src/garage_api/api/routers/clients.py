"""
garage_api.api.routers.clients

Client profile endpoints.

Responsibilities:
- CRUD over `/v1/clients`.
- Expose a client's cars and repairs (`/v1/clients/{id}/cars`, `/v1/clients/{id}/repairs`).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, db_session, page_params, settings_dep
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.schemas import CarOut, ClientIn, ClientOut, RepairOut
from garage_api.services.clients import ClientService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/clients", tags=["clients"])


def client_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> ClientService:
    return ClientService(session=session, settings=settings)


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
async def create_client(
    body: ClientIn,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[ClientOut])
async def list_clients(
    is_active: bool | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.list(principal, limit=page.limit, offset=page.offset, is_active=is_active)


@router.get("/{client_id}", response_model=ClientOut)
async def get_client(
    client_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.get(principal, client_id)


@router.put("/{client_id}", response_model=ClientOut)
async def update_client(
    client_id: uuid.UUID,
    body: ClientIn,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.update(principal, client_id, body)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
) -> Response:
    await svc.delete(principal, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{client_id}/cars", response_model=list[CarOut])
async def list_client_cars(
    client_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.cars_of(principal, client_id)


@router.get("/{client_id}/repairs", response_model=list[RepairOut])
async def list_client_repairs(
    client_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: ClientService = Depends(client_service),
):
    return await svc.repairs_of(principal, client_id)
