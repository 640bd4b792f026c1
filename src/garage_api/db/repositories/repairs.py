"""
garage_api.db.repositories.repairs

Repository for `Repair` entities.

Responsibilities:
- Resolve repair ownership through the repaired car.
- Query repairs per car and per owning client.
"""

from __future__ import annotations

import uuid

from sqlalchemy import ColumnElement, select

from garage_api.db.models import Car, Repair
from garage_api.db.repositories.base import SoftDeleteRepo


class RepairRepo(SoftDeleteRepo[Repair]):
    model = Repair

    def _owner_clause(self, owner_id: uuid.UUID) -> ColumnElement[bool]:
        # Tombstoned cars still count: a client keeps seeing repairs done on a car
        # they later removed.
        owned_cars = select(Car.id).where(Car.owner_id == owner_id)
        return Repair.car_id.in_(owned_cars)


# --- Module Notes -----------------------------------------------------------
# Repairs carry no owner column of their own; see `services.repairs`.
