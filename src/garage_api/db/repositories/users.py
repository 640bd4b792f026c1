from __future__ import annotations

from garage_api.db.models import User
from garage_api.db.repositories.base import SoftDeleteRepo


class UserRepo(SoftDeleteRepo[User]):
    model = User
    owner_column = "id"

    async def get_by_email(self, email: str) -> User | None:
        return await self.find_live(email=email.strip().lower())
