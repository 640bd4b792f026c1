"""
garage_api.auth.policy

Role + resource-ownership authorization policy.

Responsibilities:
- Decide allow/deny for (principal, operation, resource owner) without any I/O.
- Describe per-entity capability sets via `AccessRules`.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass

from garage_api.auth.models import Principal, Role


class Operation(enum.StrEnum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    list = "list"


class Decision(enum.Enum):
    allow = "allow"
    deny = "deny"

    def __bool__(self) -> bool:
        return self is Decision.allow


ALL_OPERATIONS: frozenset[Operation] = frozenset(Operation)


@dataclass(frozen=True, slots=True)
class AccessRules:
    """
    Capability sets for one entity type.

    - `employee_ops`: operations employees perform on any record of the entity.
    - `client_ops`: operations clients may perform, always gated on ownership.

    Admins and managers are not described here: they may do everything.
    """

    employee_ops: frozenset[Operation] = frozenset()
    client_ops: frozenset[Operation] = frozenset()


def authorize(
    principal: Principal,
    op: Operation,
    resource_owner_id: uuid.UUID | None = None,
    *,
    rules: AccessRules,
) -> Decision:
    if not principal.active:
        return Decision.deny
    if principal.role in (Role.admin, Role.manager):
        return Decision.allow
    if principal.role is Role.employee:
        return Decision.allow if op in rules.employee_ops else Decision.deny
    if principal.role is Role.client:
        if op not in rules.client_ops or resource_owner_id is None:
            return Decision.deny
        return Decision.allow if resource_owner_id == principal.id else Decision.deny
    return Decision.deny


# --- Module Notes -----------------------------------------------------------
# Ownership forcing (client creates always own the new record) is done by the
# service before it calls `authorize`; the policy only answers allow/deny.
