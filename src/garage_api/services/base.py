"""
garage_api.services.base

Generic authorization-aware CRUD service.

Responsibilities:
- Run create/get/list/update/delete around one soft-delete repository.
- Apply ownership forcing and the role/ownership policy before touching data.
- Own the transaction boundary (commit) and the request-scoped store deadline.
- Translate store failures into typed domain errors.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.auth.models import Principal
from garage_api.auth.policy import AccessRules, Operation, authorize
from garage_api.db.models import TimestampedMixin
from garage_api.db.repositories.base import SoftDeleteRepo
from garage_api.errors import AlreadyExists, Forbidden, InternalError, InvalidInput, NotFound
from garage_api.observability.logging import get_logger
from garage_api.settings import Settings

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=TimestampedMixin)
InT = TypeVar("InT", bound=BaseModel)

MAX_PAGE_SIZE = 200

# Bookkeeping columns are never copied from a payload.
_SYSTEM_FIELDS = frozenset({"id", "created_at", "updated_at", "deleted_at"})

_UNIQUE_VIOLATION = "23505"


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def naive_utc(value: datetime | None) -> datetime | None:
    # Payloads may carry offsets; storage is naive UTC.
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def is_unique_violation(error: IntegrityError) -> bool:
    # Postgres drivers expose SQLSTATE 23505; sqlite only reports it in the message.
    orig = error.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION:
        return True
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


@asynccontextmanager
async def store_deadline(
    session: AsyncSession, settings: Settings, entity: str
) -> AsyncIterator[None]:
    """
    Bound every store round trip of one operation by `store_timeout_seconds`.
    Cancellation propagates into the driver call; nothing is retried here.
    """

    try:
        async with asyncio.timeout(settings.store_timeout_seconds):
            yield
    except TimeoutError as e:
        log.error("store_timeout", entity=entity)
        await session.rollback()
        raise InternalError(f"{entity} store deadline exceeded") from e
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            # A concurrent writer won the race past the uniqueness pre-check.
            raise AlreadyExists(f"{entity.capitalize()} already exists") from e
        log.warning("store_constraint_violation", entity=entity, error=str(e.orig))
        raise InvalidInput(f"{entity.capitalize()} violates a store constraint") from e
    except SQLAlchemyError as e:
        log.error("store_error", entity=entity, error=str(e))
        await session.rollback()
        raise InternalError(f"{entity} store failure: {e}") from e


class ResourceService(Generic[ModelT, InT]):
    """
    One instance per request; subclasses describe a single entity:

    - `entity`: name used in messages and log events
    - `rules`: employee/client capability sets for the policy
    - `owner_field`: attribute holding the owning user id (None when ownership is
      indirect; override `_owner_id` then)
    - `immutable_fields`: extra attributes an update never changes

    and implement `_build` (payload -> new transient record) plus optionally
    `_validate` and `_unique_keys`.
    """

    entity: ClassVar[str]
    rules: ClassVar[AccessRules]
    owner_field: ClassVar[str | None] = None
    immutable_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        repo: SoftDeleteRepo[ModelT],
    ) -> None:
        self._session = session
        self._settings = settings
        self._repo = repo

    # -- hooks -----------------------------------------------------------------

    def _build(self, principal: Principal, data: InT) -> ModelT:
        raise NotImplementedError

    async def _validate(self, principal: Principal, record: ModelT) -> None:
        return None

    def _unique_keys(self, record: ModelT) -> list[dict[str, Any]]:
        return []

    async def _owner_id(self, record: ModelT) -> uuid.UUID | None:
        if self.owner_field is None:
            return None
        return getattr(record, self.owner_field)

    # -- helpers -----------------------------------------------------------------

    def _require(
        self, principal: Principal, op: Operation, owner_id: uuid.UUID | None
    ) -> None:
        if not authorize(principal, op, owner_id, rules=self.rules):
            log.info(
                "access_denied",
                entity=self.entity,
                op=str(op),
                principal_id=str(principal.id),
                role=str(principal.role),
            )
            raise Forbidden(f"Not allowed to {op} this {self.entity}")

    def _deadline(self) -> AbstractAsyncContextManager[None]:
        return store_deadline(self._session, self._settings, self.entity)

    async def _get_live(self, record_id: uuid.UUID) -> ModelT:
        record = await self._repo.get(record_id)
        if record is None:
            raise NotFound(f"{self.entity.capitalize()} not found")
        return record

    async def _ensure_unique(self, record: ModelT) -> None:
        for key in self._unique_keys(record):
            clash = await self._repo.find_live(exclude_id=record.id, **key)
            if clash is not None:
                fields = ", ".join(k.replace("_", " ") for k in key)
                raise AlreadyExists(
                    f"{self.entity.capitalize()} with this {fields} already exists"
                )

    def _preserved_fields(self, principal: Principal) -> tuple[str, ...]:
        owner = (self.owner_field,) if self.owner_field else ()
        return ("id", "created_at", *owner, *self.immutable_fields)

    def _carry_over(
        self, principal: Principal, record: ModelT, candidate: ModelT, data: InT
    ) -> None:
        for field in self._preserved_fields(principal):
            setattr(candidate, field, getattr(record, field))

    def _copy_columns(self, source: ModelT, target: ModelT) -> None:
        for column in self._repo.model.__table__.columns:
            if column.key not in _SYSTEM_FIELDS:
                setattr(target, column.key, getattr(source, column.key))

    @staticmethod
    def _touch(record: ModelT, previous: datetime | None) -> None:
        # updated_at must move strictly forward even within one clock tick.
        now = utcnow()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        record.updated_at = now

    # -- operations ----------------------------------------------------------------

    async def create(self, principal: Principal, data: InT) -> ModelT:
        async with self._deadline():
            record = self._build(principal, data)
            if self.owner_field is not None and principal.is_client:
                # Ownership forcing: whatever owner the payload named is discarded.
                setattr(record, self.owner_field, principal.id)
            self._require(principal, Operation.create, await self._owner_id(record))
            await self._validate(principal, record)
            await self._ensure_unique(record)
            now = utcnow()
            record.created_at = now
            record.updated_at = now
            record = await self._repo.create(record)
            await self._session.commit()
        log.info(f"{self.entity}_created", id=str(record.id), principal_id=str(principal.id))
        return record

    async def get(self, principal: Principal, record_id: uuid.UUID) -> ModelT:
        async with self._deadline():
            record = await self._get_live(record_id)
            self._require(principal, Operation.read, await self._owner_id(record))
        return record

    async def list(
        self,
        principal: Principal,
        *,
        owner_id: uuid.UUID | None = None,
        limit: int = 50,
        offset: int = 0,
        **filters: Any,
    ) -> list[ModelT]:
        if principal.is_client:
            # Clients only ever see their own records, whatever filter they asked for.
            owner_id = principal.id
        self._require(principal, Operation.list, owner_id)
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        async with self._deadline():
            return await self._repo.list(
                owner_id=owner_id, limit=limit, offset=max(0, offset), **filters
            )

    async def update(self, principal: Principal, record_id: uuid.UUID, data: InT) -> ModelT:
        async with self._deadline():
            record = await self._get_live(record_id)
            self._require(principal, Operation.update, await self._owner_id(record))

            # Validate a detached candidate first so a rejected update leaves the
            # tracked record untouched.
            candidate = self._build(principal, data)
            self._carry_over(principal, record, candidate, data)
            await self._validate(principal, candidate)
            await self._ensure_unique(candidate)

            previous = record.updated_at
            self._copy_columns(candidate, record)
            self._touch(record, previous)
            record = await self._repo.update(record)
            await self._session.commit()
        log.info(f"{self.entity}_updated", id=str(record.id), principal_id=str(principal.id))
        return record

    async def delete(self, principal: Principal, record_id: uuid.UUID) -> None:
        async with self._deadline():
            record = await self._get_live(record_id)
            self._require(principal, Operation.delete, await self._owner_id(record))
            await self._repo.soft_delete(record)
            await self._session.commit()
        log.info(f"{self.entity}_deleted", id=str(record_id), principal_id=str(principal.id))


# --- Module Notes -----------------------------------------------------------
# Steps of one operation are separate store round trips inside one session; only
# the final commit makes a write visible. Concurrent updates are last-writer-wins.
