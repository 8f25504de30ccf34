"""Role-scoped visibility rules shared by the directory and both ledgers.

Everything here is pure: callers pass in who is asking (``Caller``) and who
owns the record (``Owner``); no storage access happens in this module.

* hr_admin sees everything.
* manager sees employees whose ``manager_user_id`` is the manager's user id.
* employee sees only the employee profile linked to their account.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ProfileNotLinkedError


@dataclass(frozen=True)
class Caller:
    """Identity resolved once from the bearer token at the request boundary."""

    user_id: int
    role: Role
    employee_id: Optional[int] = None


@dataclass(frozen=True)
class Owner:
    """The employee a record belongs to, reduced to what scoping needs."""

    employee_id: int
    manager_user_id: Optional[int] = None


class Scope(str, Enum):
    ALL = "all"
    DIRECT_REPORTS = "direct_reports"
    SELF = "self"


def resolve_scope(caller: Caller) -> Scope:
    if caller.role == Role.HR_ADMIN:
        return Scope.ALL
    if caller.role == Role.MANAGER:
        return Scope.DIRECT_REPORTS
    if caller.employee_id is None:
        raise ProfileNotLinkedError()
    return Scope.SELF


def can_access(caller: Caller, owner: Owner) -> bool:
    if caller.role == Role.HR_ADMIN:
        return True
    if caller.role == Role.MANAGER:
        return owner.manager_user_id is not None and owner.manager_user_id == caller.user_id
    return caller.employee_id is not None and caller.employee_id == owner.employee_id


def require_access(caller: Caller, owner: Owner, *, action: str = "view this record") -> None:
    if caller.role == Role.EMPLOYEE:
        resolve_scope(caller)
    if not can_access(caller, owner):
        raise AuthorizationError(f"Not authorized to {action}")


def require_role(caller: Caller, *roles: Role) -> None:
    if caller.role not in roles:
        raise AuthorizationError("Not authorized to access this route")


def require_linked_profile(caller: Caller) -> int:
    if caller.employee_id is None:
        raise ProfileNotLinkedError()
    return caller.employee_id
