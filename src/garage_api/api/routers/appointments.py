"""
garage_api.api.routers.appointments

Appointment endpoints (`/v1/appointments`).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, db_session, page_params, settings_dep
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.db.models import AppointmentStatus
from garage_api.schemas import AppointmentIn, AppointmentOut
from garage_api.services.appointments import AppointmentService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/appointments", tags=["appointments"])


def appointment_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> AppointmentService:
    return AppointmentService(session=session, settings=settings)


@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    body: AppointmentIn,
    principal: Principal = Depends(get_principal),
    svc: AppointmentService = Depends(appointment_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[AppointmentOut])
async def list_appointments(
    customer_id: uuid.UUID | None = None,
    car_id: uuid.UUID | None = None,
    appointment_status: AppointmentStatus | None = Query(default=None, alias="status"),
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: AppointmentService = Depends(appointment_service),
):
    return await svc.list(
        principal,
        owner_id=customer_id,
        limit=page.limit,
        offset=page.offset,
        car_id=car_id,
        status=appointment_status,
    )


@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment(
    appointment_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: AppointmentService = Depends(appointment_service),
):
    return await svc.get(principal, appointment_id)


@router.put("/{appointment_id}", response_model=AppointmentOut)
async def update_appointment(
    appointment_id: uuid.UUID,
    body: AppointmentIn,
    principal: Principal = Depends(get_principal),
    svc: AppointmentService = Depends(appointment_service),
):
    return await svc.update(principal, appointment_id, body)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: AppointmentService = Depends(appointment_service),
) -> Response:
    await svc.delete(principal, appointment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
