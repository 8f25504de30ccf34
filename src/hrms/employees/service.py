from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.validators import require_email, require_enum, require_non_empty
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..database.errors import DuplicateKeyError
from ..security.access import Caller, Scope, require_access, require_role, resolve_scope
from ..users.repository import UserRepository
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "first_name",
    "last_name",
    "email",
    "phone",
    "date_of_joining",
    "department",
    "designation",
    "salary",
    "status",
    "manager_user_id",
}


def _require_salary(value) -> float:
    try:
        salary = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Salary must be a number")
    if salary < 0:
        raise ValidationError("Salary must not be negative")
    return salary


class EmployeeService:
    """Use case: the employee directory."""

    def __init__(self, employees: EmployeeRepository, users: UserRepository):
        self._employees = employees
        self._users = users

    def _require_manager(self, manager_user_id: Optional[int]) -> Optional[int]:
        if manager_user_id is None:
            return None
        if not self._users.get_by_id(int(manager_user_id)):
            raise ValidationError("Manager user does not exist")
        return int(manager_user_id)

    def get(self, *, caller: Caller, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        require_access(caller, employee.owner(), action="view this employee profile")
        return employee

    def list_employees(self, *, caller: Caller) -> Sequence[Employee]:
        if caller.role == Role.EMPLOYEE:
            raise AuthorizationError("Not authorized to view all employees")
        if resolve_scope(caller) == Scope.DIRECT_REPORTS:
            return self._employees.list_all(manager_user_id=caller.user_id)
        return self._employees.list_all()

    def create(
        self,
        *,
        caller: Caller,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: str,
        date_of_joining: Optional[date],
        department: str,
        designation: str,
        salary,
        phone: Optional[str] = None,
        manager_user_id: Optional[int] = None,
    ) -> Employee:
        require_role(caller, Role.HR_ADMIN)

        if date_of_joining is None:
            raise ValidationError("Date of joining is required")
        data = NewEmployee(
            employee_code=require_non_empty(employee_code, "Employee ID"),
            first_name=require_non_empty(first_name, "First name"),
            last_name=require_non_empty(last_name, "Last name"),
            email=require_email(email),
            phone=(phone or "").strip() or None,
            date_of_joining=date_of_joining,
            department=require_non_empty(department, "Department"),
            designation=require_non_empty(designation, "Designation"),
            salary=_require_salary(salary),
            manager_user_id=self._require_manager(manager_user_id),
        )

        if self._employees.find_by_code_or_email(employee_code=data.employee_code, email=data.email):
            raise ConflictError("Employee with this ID or Email already exists")
        try:
            new_id = self._employees.create(data)
        except DuplicateKeyError:
            raise ConflictError("Employee with this ID or Email already exists")

        logger.info("Employee %s (%s) created by user %s", new_id, data.employee_code, caller.user_id)
        return self._employees.get_by_id(new_id)

    def update(self, *, caller: Caller, employee_id: int, **fields: Any) -> Employee:
        """Partial update; fields left as ``None`` keep their stored value."""
        require_role(caller, Role.HR_ADMIN)

        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        changes: dict[str, Any] = {}
        for name in ("first_name", "last_name", "department", "designation"):
            if fields.get(name) is not None:
                changes[name] = require_non_empty(fields[name], name.replace("_", " ").capitalize())
        if fields.get("email") is not None:
            changes["email"] = require_email(fields["email"])
        if fields.get("phone") is not None:
            changes["phone"] = str(fields["phone"]).strip() or None
        if fields.get("date_of_joining") is not None:
            changes["date_of_joining"] = fields["date_of_joining"]
        if fields.get("salary") is not None:
            changes["salary"] = _require_salary(fields["salary"])
        if fields.get("status") is not None:
            changes["status"] = require_enum(EmployeeStatus, fields["status"], "status")
        if fields.get("manager_user_id") is not None:
            changes["manager_user_id"] = self._require_manager(fields["manager_user_id"])

        try:
            self._employees.update(employee.id, changes)
        except DuplicateKeyError:
            raise ConflictError("Employee with this Email already exists")

        logger.info("Employee %s updated by user %s: %s", employee.id, caller.user_id, sorted(changes))
        return self._employees.get_by_id(employee.id)

    def terminate(self, *, caller: Caller, employee_id: int) -> Employee:
        """Directory "delete": status becomes terminated, history is kept."""
        require_role(caller, Role.HR_ADMIN)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        self._employees.set_status(employee.id, EmployeeStatus.TERMINATED)
        logger.info("Employee %s terminated by user %s", employee.id, caller.user_id)
        return self._employees.get_by_id(employee.id)
