"""
garage_api.services.repairs

Repair service.

Responsibilities:
- Attribute repairs to a technician and track their completion.
- Resolve repair ownership through the repaired car.
- Reject duplicate repairs (same car, description and start time) among live records.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal, Role
from garage_api.auth.policy import AccessRules, Operation
from garage_api.db.models import Repair, RepairStatus
from garage_api.db.repositories.cars import CarRepo
from garage_api.db.repositories.repairs import RepairRepo
from garage_api.db.repositories.users import UserRepo
from garage_api.errors import NotFound
from garage_api.schemas import RepairIn
from garage_api.services.base import MAX_PAGE_SIZE, ResourceService, naive_utc, utcnow
from garage_api.services.validation import missing, raise_if
from garage_api.settings import Settings

REPAIR_RULES = AccessRules(
    employee_ops=frozenset(
        {Operation.create, Operation.read, Operation.update, Operation.list}
    ),
    client_ops=frozenset({Operation.read, Operation.list}),
)

_STAFF_ROLES = frozenset({Role.admin, Role.manager, Role.employee})


class RepairService(ResourceService[Repair, RepairIn]):
    entity = "repair"
    rules = REPAIR_RULES
    immutable_fields = ("car_id", "technician_id")

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._repairs = RepairRepo(session)
        super().__init__(session=session, settings=settings, repo=self._repairs)
        self._cars = CarRepo(session)
        self._users = UserRepo(session)

    def _build(self, principal: Principal, data: RepairIn) -> Repair:
        if principal.is_employee or data.technician_id is None:
            technician_id = principal.id
        else:
            technician_id = data.technician_id
        completed_at = naive_utc(data.completed_at)
        if data.status == RepairStatus.completed and completed_at is None:
            completed_at = utcnow()
        return Repair(
            car_id=data.car_id,
            technician_id=technician_id,
            description=data.description,
            status=data.status,
            cost=data.cost,
            started_at=naive_utc(data.started_at),
            completed_at=completed_at,
        )

    def _carry_over(
        self, principal: Principal, record: Repair, candidate: Repair, data: RepairIn
    ) -> None:
        super()._carry_over(principal, record, candidate, data)
        # Completion is stamped once, when the status first becomes completed.
        if (
            data.completed_at is None
            and record.status == RepairStatus.completed
            and candidate.status == RepairStatus.completed
        ):
            candidate.completed_at = record.completed_at

    async def _owner_id(self, record: Repair) -> uuid.UUID | None:
        car = await self._cars.get(record.car_id, include_deleted=True)
        return car.owner_id if car is not None else None

    async def _validate(self, principal: Principal, record: Repair) -> None:
        problems = missing(record, "description")
        if record.cost < 0:
            problems.append("cost must not be negative")
        if record.id is None:
            # References are checked on create only; history survives a removed car.
            if await self._cars.get(record.car_id) is None:
                problems.append("car does not exist")
            technician = await self._users.get(record.technician_id)
            if technician is None or technician.role not in _STAFF_ROLES:
                problems.append("technician must be an existing staff member")
        if (
            record.started_at is not None
            and record.completed_at is not None
            and record.completed_at < record.started_at
        ):
            problems.append("completed at must not be before started at")
        raise_if(problems)

    def _unique_keys(self, record: Repair) -> list[dict[str, Any]]:
        return [
            {
                "car_id": record.car_id,
                "description": record.description,
                "started_at": record.started_at,
            }
        ]

    async def list_for_car(
        self,
        principal: Principal,
        car_id: uuid.UUID,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Repair]:
        async with self._deadline():
            car = await self._cars.get(car_id)
            if car is None:
                raise NotFound("Car not found")
            self._require(principal, Operation.list, car.owner_id)
            return await self._repairs.list(
                car_id=car_id,
                limit=max(1, min(limit, MAX_PAGE_SIZE)),
                offset=max(0, offset),
            )
