from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal, Role
from garage_api.auth.policy import ALL_OPERATIONS, AccessRules, Operation
from garage_api.db.models import Appointment
from garage_api.db.repositories.appointments import AppointmentRepo
from garage_api.db.repositories.cars import CarRepo
from garage_api.db.repositories.users import UserRepo
from garage_api.schemas import AppointmentIn
from garage_api.services.base import ResourceService, naive_utc
from garage_api.services.validation import missing, raise_if
from garage_api.settings import Settings

APPOINTMENT_RULES = AccessRules(
    employee_ops=frozenset({Operation.read, Operation.update, Operation.list}),
    client_ops=ALL_OPERATIONS,
)


class AppointmentService(ResourceService[Appointment, AppointmentIn]):
    entity = "appointment"
    rules = APPOINTMENT_RULES
    owner_field = "customer_id"

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings, repo=AppointmentRepo(session))
        self._cars = CarRepo(session)
        self._users = UserRepo(session)

    def _build(self, principal: Principal, data: AppointmentIn) -> Appointment:
        return Appointment(
            customer_id=data.customer_id,
            car_id=data.car_id,
            service_type=data.service_type,
            status=data.status,
            scheduled_at=naive_utc(data.scheduled_at),
            notes=data.notes,
        )

    async def _validate(self, principal: Principal, record: Appointment) -> None:
        problems = missing(record, "service_type", "scheduled_at")
        if record.customer_id is None:
            problems.append("customer id is required")
            raise_if(problems)

        customer = await self._users.get(record.customer_id)
        if customer is None or customer.role != Role.client:
            problems.append("customer must be an existing client")
        car = await self._cars.get(record.car_id)
        if car is None:
            problems.append("car does not exist")
        elif car.owner_id != record.customer_id:
            problems.append("car does not belong to the customer")
        raise_if(problems)
