"""
garage_api.services.cars

Car service.

Responsibilities:
- Normalize and validate car payloads (plate, VIN, year, mileage, owner).
- Keep license plates and VINs unique among live cars.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal, Role
from garage_api.auth.policy import ALL_OPERATIONS, AccessRules, Operation
from garage_api.db.models import Car
from garage_api.db.repositories.cars import CarRepo
from garage_api.db.repositories.users import UserRepo
from garage_api.schemas import CarIn
from garage_api.services.base import ResourceService, utcnow
from garage_api.services.validation import missing, raise_if
from garage_api.settings import Settings

CAR_RULES = AccessRules(
    employee_ops=frozenset({Operation.read, Operation.list}),
    client_ops=ALL_OPERATIONS,
)

MIN_YEAR = 1900


def normalize_plate(plate: str) -> str:
    return plate.strip().upper()


class CarService(ResourceService[Car, CarIn]):
    entity = "car"
    rules = CAR_RULES
    owner_field = "owner_id"

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings, repo=CarRepo(session))
        self._users = UserRepo(session)

    def _build(self, principal: Principal, data: CarIn) -> Car:
        vin = (data.vin or "").strip().upper() or None
        return Car(
            owner_id=data.owner_id,
            make=data.make,
            model=data.model,
            year=data.year,
            license_plate=normalize_plate(data.license_plate),
            vin=vin,
            color=data.color,
            mileage=data.mileage,
        )

    async def _validate(self, principal: Principal, record: Car) -> None:
        problems = missing(record, "make", "model", "license_plate", "color")
        max_year = utcnow().year + 1
        if not MIN_YEAR <= record.year <= max_year:
            problems.append(f"year must be between {MIN_YEAR} and {max_year}")
        if record.mileage < 0:
            problems.append("mileage must not be negative")
        if record.owner_id is None:
            problems.append("owner id is required")
        else:
            owner = await self._users.get(record.owner_id)
            if owner is None or owner.role != Role.client:
                problems.append("owner must be an existing client")
        raise_if(problems)

    def _unique_keys(self, record: Car) -> list[dict[str, Any]]:
        keys: list[dict[str, Any]] = [{"license_plate": record.license_plate}]
        if record.vin:
            keys.append({"vin": record.vin})
        return keys

