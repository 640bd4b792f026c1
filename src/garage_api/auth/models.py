"""
garage_api.auth.models

Auth domain models.

Responsibilities:
- Define roles and the authenticated identity type (`Principal`) passed to services.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass


class Role(enum.StrEnum):
    # Capability sets, not a strict hierarchy: admin/manager manage everything,
    # employees operate on shop resources, clients only on what they own.
    admin = "admin"
    manager = "manager"
    employee = "employee"
    client = "client"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, resolved once per request.
    """

    id: uuid.UUID
    role: Role
    active: bool = True
    email: str | None = None

    @property
    def can_manage(self) -> bool:
        return self.role in (Role.admin, Role.manager)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    @property
    def is_employee(self) -> bool:
        return self.role is Role.employee

    @property
    def is_client(self) -> bool:
        return self.role is Role.client


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services, and policy checks.
