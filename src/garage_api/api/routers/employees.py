"""
garage_api.api.routers.employees

Employee record endpoints (`/v1/employees`), served through the cache-backed service.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.api.deps import Page, cache_from_app, db_session, page_params, settings_dep
from garage_api.auth.deps import get_principal
from garage_api.auth.models import Principal
from garage_api.cache import Cache
from garage_api.schemas import EmployeeIn, EmployeeOut
from garage_api.services.employees import EmployeeService
from garage_api.settings import Settings

router = APIRouter(prefix="/v1/employees", tags=["employees"])


def employee_service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    cache: Cache = Depends(cache_from_app),
) -> EmployeeService:
    return EmployeeService(session=session, settings=settings, cache=cache)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeIn,
    principal: Principal = Depends(get_principal),
    svc: EmployeeService = Depends(employee_service),
):
    return await svc.create(principal, body)


@router.get("", response_model=list[EmployeeOut])
async def list_employees(
    department: str | None = None,
    is_active: bool | None = None,
    page: Page = Depends(page_params),
    principal: Principal = Depends(get_principal),
    svc: EmployeeService = Depends(employee_service),
):
    return await svc.list(
        principal,
        limit=page.limit,
        offset=page.offset,
        department=department,
        is_active=is_active,
    )


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee(
    employee_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: EmployeeService = Depends(employee_service),
):
    return await svc.get(principal, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeIn,
    principal: Principal = Depends(get_principal),
    svc: EmployeeService = Depends(employee_service),
):
    return await svc.update(principal, employee_id, body)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: EmployeeService = Depends(employee_service),
) -> Response:
    await svc.delete(principal, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
