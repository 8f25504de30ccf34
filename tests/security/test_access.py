from __future__ import annotations

import pytest

from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError, ProfileNotLinkedError
from hrms.security.access import (
    Caller,
    Owner,
    Scope,
    can_access,
    require_access,
    require_linked_profile,
    require_role,
    resolve_scope,
)

ADMIN = Caller(user_id=1, role=Role.HR_ADMIN)
MANAGER = Caller(user_id=2, role=Role.MANAGER)
EMPLOYEE = Caller(user_id=3, role=Role.EMPLOYEE, employee_id=10)
UNLINKED = Caller(user_id=4, role=Role.EMPLOYEE)

REPORT = Owner(employee_id=10, manager_user_id=2)
STRANGER = Owner(employee_id=20, manager_user_id=None)


def test_resolve_scope():
    assert resolve_scope(ADMIN) == Scope.ALL
    assert resolve_scope(MANAGER) == Scope.DIRECT_REPORTS
    assert resolve_scope(EMPLOYEE) == Scope.SELF
    with pytest.raises(ProfileNotLinkedError):
        resolve_scope(UNLINKED)


@pytest.mark.parametrize(
    "caller, owner, expected",
    [
        (ADMIN, REPORT, True),
        (ADMIN, STRANGER, True),
        (MANAGER, REPORT, True),
        (MANAGER, STRANGER, False),
        (EMPLOYEE, REPORT, True),
        (EMPLOYEE, STRANGER, False),
        (UNLINKED, REPORT, False),
    ],
)
def test_can_access(caller, owner, expected):
    assert can_access(caller, owner) is expected


def test_manager_has_no_implicit_self_visibility():
    linked_manager = Caller(user_id=2, role=Role.MANAGER, employee_id=20)
    assert not can_access(linked_manager, STRANGER)


def test_require_access_distinguishes_unlinked_from_forbidden():
    with pytest.raises(ProfileNotLinkedError):
        require_access(UNLINKED, REPORT)
    with pytest.raises(AuthorizationError, match="Not authorized to view"):
        require_access(EMPLOYEE, STRANGER)
    require_access(MANAGER, REPORT)


def test_require_role():
    require_role(ADMIN, Role.HR_ADMIN)
    with pytest.raises(AuthorizationError):
        require_role(MANAGER, Role.HR_ADMIN)


def test_require_linked_profile():
    assert require_linked_profile(EMPLOYEE) == 10
    with pytest.raises(ProfileNotLinkedError):
        require_linked_profile(UNLINKED)
