from __future__ import annotations

from garage_api.db.models import Client
from garage_api.db.repositories.base import SoftDeleteRepo


class ClientRepo(SoftDeleteRepo[Client]):
    model = Client
    owner_column = "user_id"
