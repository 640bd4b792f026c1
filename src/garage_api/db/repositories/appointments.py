from __future__ import annotations

from garage_api.db.models import Appointment
from garage_api.db.repositories.base import SoftDeleteRepo


class AppointmentRepo(SoftDeleteRepo[Appointment]):
    model = Appointment
    owner_column = "customer_id"
