"""
garage_api.api.routers.cars

Car endpoints.

Responsibilities:
- CRUD over `/v1/cars` plus the repair history of one car.
- Delegate every rule (ownership, validation, uniqueness) to `CarService`.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, db_session, page_params, settings_dep
from garage_api.api.routers.repairs import repair_service
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.schemas import CarIn, CarOut, RepairOut
from garage_api.services.cars import CarService
from garage_api.services.repairs import RepairService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/cars", tags=["cars"])


def car_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> CarService:
    return CarService(session=session, settings=settings)


@router.post("", response_model=CarOut, status_code=status.HTTP_201_CREATED)
async def create_car(
    body: CarIn,
    principal: Principal = Depends(get_principal),
    svc: CarService = Depends(car_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[CarOut])
async def list_cars(
    owner_id: uuid.UUID | None = None,
    make: str | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: CarService = Depends(car_service),
):
    return await svc.list(
        principal, owner_id=owner_id, limit=page.limit, offset=page.offset, make=make
    )


@router.get("/{car_id}", response_model=CarOut)
async def get_car(
    car_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: CarService = Depends(car_service),
):
    return await svc.get(principal, car_id)


@router.put("/{car_id}", response_model=CarOut)
async def update_car(
    car_id: uuid.UUID,
    body: CarIn,
    principal: Principal = Depends(get_principal),
    svc: CarService = Depends(car_service),
):
    return await svc.update(principal, car_id, body)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_car(
    car_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: CarService = Depends(car_service),
) -> Response:
    await svc.delete(principal, car_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{car_id}/repairs", response_model=list[RepairOut])
async def list_car_repairs(
    car_id: uuid.UUID,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: RepairService = Depends(repair_service),
):
    return await svc.list_for_car(principal, car_id, limit=page.limit, offset=page.offset)
