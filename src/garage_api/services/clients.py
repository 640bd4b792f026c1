"""
garage_api.services.clients

Client profile service.

Responsibilities:
- Keep one live profile per login and unique profile emails.
- Expose a client's cars and repairs through the car/repair access rules.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal, Role
from garage_api.auth.policy import AccessRules, Operation
from garage_api.db.models import Car, Client, Repair
from garage_api.db.repositories.clients import ClientRepo
from garage_api.db.repositories.users import UserRepo
from garage_api.schemas import ClientIn
from garage_api.services.base import MAX_PAGE_SIZE, ResourceService
from garage_api.services.cars import CarService
from garage_api.services.repairs import RepairService
from garage_api.services.validation import is_valid_email, missing, normalize_email, raise_if
from garage_api.settings import Settings

CLIENT_RULES = AccessRules(
    employee_ops=frozenset({Operation.read, Operation.list}),
    client_ops=frozenset({Operation.create, Operation.read, Operation.update}),
)


class ClientService(ResourceService[Client, ClientIn]):
    entity = "client"
    rules = CLIENT_RULES
    owner_field = "user_id"

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        super().__init__(session=session, settings=settings, repo=ClientRepo(session))
        self._users = UserRepo(session)

    def _build(self, principal: Principal, data: ClientIn) -> Client:
        return Client(
            user_id=data.user_id,
            email=normalize_email(data.email),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            address=data.address,
            city=data.city,
            state=data.state,
            zip_code=data.zip_code,
            is_active=data.is_active,
        )

    def _preserved_fields(self, principal: Principal) -> tuple[str, ...]:
        fields = super()._preserved_fields(principal)
        if principal.is_client:
            # Deactivation is a staff decision.
            return (*fields, "is_active")
        return fields

    async def _validate(self, principal: Principal, record: Client) -> None:
        problems = missing(record, "email", "first_name", "last_name")
        if record.email and not is_valid_email(record.email):
            problems.append("email is not a valid address")
        if record.user_id is not None:
            user = await self._users.get(record.user_id)
            if user is None or user.role != Role.client:
                problems.append("user must be an existing client account")
        raise_if(problems)

    def _unique_keys(self, record: Client) -> list[dict[str, Any]]:
        keys: list[dict[str, Any]] = [{"email": record.email}]
        if record.user_id is not None:
            keys.append({"user_id": record.user_id})
        return keys

    async def cars_of(self, principal: Principal, client_id: uuid.UUID) -> list[Car]:
        client = await self.get(principal, client_id)
        if client.user_id is None:
            return []
        cars = CarService(session=self._session, settings=self._settings)
        return await cars.list(principal, owner_id=client.user_id, limit=MAX_PAGE_SIZE)

    async def repairs_of(self, principal: Principal, client_id: uuid.UUID) -> list[Repair]:
        client = await self.get(principal, client_id)
        if client.user_id is None:
            return []
        repairs = RepairService(session=self._session, settings=self._settings)
        return await repairs.list(principal, owner_id=client.user_id, limit=MAX_PAGE_SIZE)


# --- Module Notes -----------------------------------------------------------
# Walk-in profiles (no `user_id`) own nothing: cars and repairs hang off user ids.
