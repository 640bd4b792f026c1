from __future__ import annotations

from garage_api.db.models import Car
from garage_api.db.repositories.base import SoftDeleteRepo


class CarRepo(SoftDeleteRepo[Car]):
    model = Car
    owner_column = "owner_id"

    async def get_by_license_plate(self, license_plate: str) -> Car | None:
        return await self.find_live(license_plate=license_plate)
