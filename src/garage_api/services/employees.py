"""
garage_api.services.employees

Employee record service with a read-through cache.

Responsibilities:
- Validate employee records and assign immutable employee codes.
- Serve `get` / `list` from the cache when possible.
- Invalidate cached entries on every write.
"""

from __future__ import annotations

import secrets
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal
from garage_api.auth.policy import AccessRules, Operation
from garage_api.cache import Cache
from garage_api.db.models import Employee
from garage_api.db.repositories.employees import EmployeeRepo
from garage_api.db.repositories.users import UserRepo
from garage_api.schemas import EmployeeIn, EmployeeOut
from garage_api.services.base import MAX_PAGE_SIZE, ResourceService
from garage_api.services.validation import is_valid_email, missing, normalize_email, raise_if
from garage_api.settings import Settings

EMPLOYEE_RULES = AccessRules(
    employee_ops=frozenset({Operation.read, Operation.list}),
    client_ops=frozenset(),
)

LIST_PREFIX = "employees:list:"
MAX_HOURS_PER_WEEK = 168


def record_key(employee_id: uuid.UUID) -> str:
    return f"employee:{employee_id}"


def new_employee_code() -> str:
    return secrets.token_hex(4).upper()


class EmployeeService(ResourceService[Employee, EmployeeIn]):
    entity = "employee"
    rules = EMPLOYEE_RULES
    owner_field = "user_id"
    immutable_fields = ("employee_code",)

    def __init__(self, *, session: AsyncSession, settings: Settings, cache: Cache) -> None:
        super().__init__(session=session, settings=settings, repo=EmployeeRepo(session))
        self._cache = cache
        self._users = UserRepo(session)

    def _build(self, principal: Principal, data: EmployeeIn) -> Employee:
        return Employee(
            user_id=data.user_id,
            employee_code=new_employee_code(),
            first_name=data.first_name,
            last_name=data.last_name,
            email=normalize_email(data.email),
            phone=data.phone,
            department=data.department,
            position=data.position,
            hourly_rate=data.hourly_rate,
            hours_per_week=data.hours_per_week,
            salary=data.salary,
            hire_date=data.hire_date,
            is_active=data.is_active,
        )

    async def _validate(self, principal: Principal, record: Employee) -> None:
        problems = missing(record, "first_name", "last_name", "email", "position")
        if record.email and not is_valid_email(record.email):
            problems.append("email is not a valid address")
        if record.hourly_rate < 0:
            problems.append("hourly rate must not be negative")
        if record.salary < 0:
            problems.append("salary must not be negative")
        if not 0 <= record.hours_per_week <= MAX_HOURS_PER_WEEK:
            problems.append(f"hours per week must be between 0 and {MAX_HOURS_PER_WEEK}")
        if record.user_id is not None and await self._users.get(record.user_id) is None:
            problems.append("user must be an existing account")
        raise_if(problems)

    def _unique_keys(self, record: Employee) -> list[dict[str, Any]]:
        return [{"email": record.email}, {"employee_code": record.employee_code}]

    async def _invalidate(self, employee_id: uuid.UUID) -> None:
        await self._cache.delete(record_key(employee_id))
        await self._cache.delete_prefix(LIST_PREFIX)

    # -- cached reads ------------------------------------------------------------

    async def get(  # type: ignore[override]
        self, principal: Principal, record_id: uuid.UUID
    ) -> EmployeeOut:
        key = record_key(record_id)
        cached = await self._cache.get_json(key)
        if cached is not None:
            employee = EmployeeOut.model_validate(cached)
            self._require(principal, Operation.read, employee.user_id)
            return employee

        employee = EmployeeOut.model_validate(await super().get(principal, record_id))
        await self._cache.set_json(
            key, employee.model_dump(mode="json"), ttl=self._settings.cache_ttl_seconds
        )
        return employee

    async def list(  # type: ignore[override]
        self,
        principal: Principal,
        *,
        owner_id: uuid.UUID | None = None,
        limit: int = 50,
        offset: int = 0,
        **filters: Any,
    ) -> list[EmployeeOut]:
        if principal.is_client:
            owner_id = principal.id
        self._require(principal, Operation.list, owner_id)
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        parts = [f"owner={owner_id}", f"limit={limit}", f"offset={offset}"]
        parts += [f"{k}={v}" for k, v in sorted(filters.items()) if v is not None]
        key = LIST_PREFIX + ":".join(parts)
        cached = await self._cache.get_json(key)
        if cached is not None:
            return [EmployeeOut.model_validate(item) for item in cached]

        records = await super().list(
            principal, owner_id=owner_id, limit=limit, offset=offset, **filters
        )
        employees = [EmployeeOut.model_validate(r) for r in records]
        await self._cache.set_json(
            key,
            [e.model_dump(mode="json") for e in employees],
            ttl=self._settings.cache_list_ttl_seconds,
        )
        return employees

    # -- writes ------------------------------------------------------------------

    async def create(self, principal: Principal, data: EmployeeIn) -> Employee:
        record = await super().create(principal, data)
        await self._invalidate(record.id)
        return record

    async def update(
        self, principal: Principal, record_id: uuid.UUID, data: EmployeeIn
    ) -> Employee:
        record = await super().update(principal, record_id, data)
        await self._invalidate(record_id)
        return record

    async def delete(self, principal: Principal, record_id: uuid.UUID) -> None:
        await super().delete(principal, record_id)
        await self._invalidate(record_id)


# --- Module Notes -----------------------------------------------------------
# Keys: `employee:<id>` (cache_ttl_seconds) and `employees:list:<query>`
# (cache_list_ttl_seconds). Cached payloads are `EmployeeOut` dumps.
