from __future__ import annotations

from garage_api.db.models import Employee
from garage_api.db.repositories.base import SoftDeleteRepo


class EmployeeRepo(SoftDeleteRepo[Employee]):
    model = Employee
    owner_column = "user_id"
