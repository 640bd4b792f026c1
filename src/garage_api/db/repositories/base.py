"""
garage_api.db.repositories.base

Generic soft-delete aware repository.

Responsibilities:
- Apply the liveness predicate (`deleted_at IS NULL`) to every read.
- Provide get / list / create / update / soft-delete / natural-key lookup.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from garage_api.db.models import TimestampedMixin

ModelT = TypeVar("ModelT", bound=TimestampedMixin)


class SoftDeleteRepo(Generic[ModelT]):
    model: ClassVar[type[Any]]
    # Column holding the owning user id; None for indirectly owned records.
    owner_column: ClassVar[str | None] = None

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _live(self) -> ColumnElement[bool]:
        return self.model.deleted_at.is_(None)

    def _select_live(self) -> Select[Any]:
        return select(self.model).where(self._live())

    def _owner_clause(self, owner_id: uuid.UUID) -> ColumnElement[bool]:
        if self.owner_column is None:
            raise NotImplementedError(f"{type(self).__name__} has no owner column")
        return getattr(self.model, self.owner_column) == owner_id

    async def get(self, record_id: uuid.UUID, *, include_deleted: bool = False) -> ModelT | None:
        record = await self._session.get(self.model, record_id)
        if record is None or (record.deleted_at is not None and not include_deleted):
            return None
        return record

    async def list(
        self,
        *,
        owner_id: uuid.UUID | None = None,
        limit: int = 50,
        offset: int = 0,
        **filters: Any,
    ) -> list[ModelT]:
        stmt = self._select_live()
        if owner_id is not None:
            stmt = stmt.where(self._owner_clause(owner_id))
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, field) == value)
        # Newest first; id as a tiebreaker keeps pagination stable.
        stmt = (
            stmt.order_by(desc(self.model.created_at), self.model.id).limit(limit).offset(offset)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def find_live(
        self, *, exclude_id: uuid.UUID | None = None, **key: Any
    ) -> ModelT | None:
        # Natural-key lookup used for uniqueness checks (e.g. license plate).
        stmt = self._select_live()
        for field, value in key.items():
            column = getattr(self.model, field)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).scalars().first()

    async def create(self, record: ModelT) -> ModelT:
        self._session.add(record)
        await self._session.flush()
        return record

    async def update(self, record: ModelT) -> ModelT:
        # Full-record replace: the caller mutated the tracked instance in place.
        await self._session.flush()
        return record

    async def soft_delete(self, record: ModelT) -> None:
        record.deleted_at = datetime.now(UTC).replace(tzinfo=None)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Records are never physically deleted; `include_deleted=True` exists only so
# services can resolve the owner of records hanging off a tombstoned parent.
