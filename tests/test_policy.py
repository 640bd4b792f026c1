"""
tests.test_policy

Decision table of the role/ownership authorization policy.
"""

from __future__ import annotations

import uuid

import pytest

from garage_api.auth.models import Principal, Role
from garage_api.auth.policy import ALL_OPERATIONS, AccessRules, Decision, Operation, authorize

RULES = AccessRules(
    employee_ops=frozenset({Operation.read, Operation.list}),
    client_ops=frozenset({Operation.create, Operation.read, Operation.update}),
)

ME = uuid.uuid4()
SOMEONE_ELSE = uuid.uuid4()


def _p(role: Role, *, active: bool = True) -> Principal:
    return Principal(id=ME, role=role, active=active)


@pytest.mark.parametrize("role", [Role.admin, Role.manager])
@pytest.mark.parametrize("op", sorted(ALL_OPERATIONS))
def test_managers_may_do_anything(role: Role, op: Operation) -> None:
    assert authorize(_p(role), op, SOMEONE_ELSE, rules=RULES) is Decision.allow


@pytest.mark.parametrize("op", sorted(ALL_OPERATIONS))
def test_employee_follows_capability_set_regardless_of_owner(op: Operation) -> None:
    expected = Decision.allow if op in RULES.employee_ops else Decision.deny
    assert authorize(_p(Role.employee), op, SOMEONE_ELSE, rules=RULES) is expected
    assert authorize(_p(Role.employee), op, None, rules=RULES) is expected


@pytest.mark.parametrize("op", sorted(ALL_OPERATIONS))
def test_client_needs_capability_and_ownership(op: Operation) -> None:
    own = authorize(_p(Role.client), op, ME, rules=RULES)
    foreign = authorize(_p(Role.client), op, SOMEONE_ELSE, rules=RULES)

    assert own is (Decision.allow if op in RULES.client_ops else Decision.deny)
    assert foreign is Decision.deny


def test_client_without_owner_is_denied() -> None:
    assert authorize(_p(Role.client), Operation.read, None, rules=RULES) is Decision.deny


@pytest.mark.parametrize("role", list(Role))
def test_inactive_principals_are_always_denied(role: Role) -> None:
    principal = _p(role, active=False)
    for op in ALL_OPERATIONS:
        assert authorize(principal, op, ME, rules=RULES) is Decision.deny


def test_decision_truthiness() -> None:
    assert Decision.allow
    assert not Decision.deny


def test_policy_is_deterministic() -> None:
    principal = _p(Role.client)
    results = {authorize(principal, Operation.update, ME, rules=RULES) for _ in range(10)}
    assert results == {Decision.allow}
