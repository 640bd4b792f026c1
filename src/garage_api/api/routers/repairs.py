"""
garage_api.api.routers.repairs

Repair endpoints (`/v1/repairs`).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, db_session, page_params, settings_dep
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.db.models import RepairStatus
from garage_api.schemas import RepairIn, RepairOut
from garage_api.services.repairs import RepairService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/repairs", tags=["repairs"])


def repair_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> RepairService:
    return RepairService(session=session, settings=settings)


@router.post("", response_model=RepairOut, status_code=status.HTTP_201_CREATED)
async def create_repair(
    body: RepairIn,
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[RepairOut])
async def list_repairs(
    owner_id: uuid.UUID | None = None,
    car_id: uuid.UUID | None = None,
    repair_status: RepairStatus | None = Query(default=None, alias="status"),
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
):
    return await svc.list(
        principal,
        owner_id=owner_id,
        limit=page.limit,
        offset=page.offset,
        car_id=car_id,
        status=repair_status,
    )


@router.get("/{repair_id}", response_model=RepairOut)
async def get_repair(
    repair_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
):
    return await svc.get(principal, repair_id)


@router.put("/{repair_id}", response_model=RepairOut)
async def update_repair(
    repair_id: uuid.UUID,
    body: RepairIn,
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
):
    return await svc.update(principal, repair_id, body)


@router.delete("/{repair_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_repair(
    repair_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
) -> Response:
    await svc.delete(principal, repair_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
