from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..security.access import (
    Caller,
    Owner,
    Scope,
    require_access,
    require_linked_profile,
    require_role,
    resolve_scope,
)
from .model import LeaveRequest
from .repository import LeaveRepository
from .transitions import ensure_transition

logger = logging.getLogger(__name__)


class LeaveService:
    """Use case: apply for leave and move requests through the approval workflow."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def _target_employee(self, caller: Caller, employee_id: Optional[int]) -> int:
        if caller.role == Role.HR_ADMIN:
            if employee_id is None:
                raise ValidationError("Employee ID is required")
            return int(employee_id)

        own = require_linked_profile(caller)
        if employee_id is not None and int(employee_id) != own:
            if caller.role == Role.MANAGER:
                raise AuthorizationError("Managers cannot apply for leave on behalf of others")
            raise AuthorizationError("Employees can only apply for their own leave")
        return own

    def _owner(self, employee_id: int) -> Owner:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            return Owner(employee_id=employee_id)
        return employee.owner()

    def apply(
        self,
        *,
        caller: Caller,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
        leave_type: LeaveType | str = LeaveType.CASUAL,
        employee_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> LeaveRequest:
        leave_type = require_enum(LeaveType, leave_type or LeaveType.CASUAL, "leave type")
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        if start_date > end_date:
            raise ValidationError("Start date must be on or before end date")
        reason = require_non_empty(reason, "Reason")

        target = self._target_employee(caller, employee_id)
        if not self._employees.get_by_id(target):
            raise NotFoundError("Employee not found")

        leave_id = self._leaves.create(
            employee_id=target,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            applied_at=now or now_local(),
        )
        logger.info(
            "Leave %s applied for employee %s by user %s (%s, %s..%s)",
            leave_id,
            target,
            caller.user_id,
            leave_type.value,
            start_date,
            end_date,
        )
        return self._leaves.get_by_id(leave_id)

    def set_status(
        self,
        *,
        caller: Caller,
        leave_id: int,
        status: LeaveStatus | str,
        now: datetime | None = None,
    ) -> LeaveRequest:
        require_role(caller, Role.HR_ADMIN, Role.MANAGER)
        target = require_enum(LeaveStatus, status, "status")

        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")

        require_access(caller, self._owner(leave.employee_id), action="approve/reject this leave request")
        ensure_transition(leave.status, target)

        if not self._leaves.decide(
            leave_id=leave.leave_id,
            expected_status=leave.status,
            status=target,
            approved_by=caller.user_id,
            approval_date=now or now_local(),
        ):
            # Someone else decided in between; report against the state that won.
            current = self._leaves.get_by_id(leave.leave_id)
            raise InvalidTransitionError(current.status if current else leave.status, target)

        logger.info(
            "Leave %s: %s -> %s by user %s", leave.leave_id, leave.status.value, target.value, caller.user_id
        )
        return self._leaves.get_by_id(leave.leave_id)

    def list_leaves(self, *, caller: Caller, status: Optional[LeaveStatus | str] = None) -> Sequence[LeaveRequest]:
        status = require_enum(LeaveStatus, status, "status") if status else None

        scope = resolve_scope(caller)
        if scope == Scope.ALL:
            employee_ids = None
        elif scope == Scope.DIRECT_REPORTS:
            employee_ids = list(self._employees.list_ids_by_manager(caller.user_id))
        else:
            employee_ids = [caller.employee_id]
        return self._leaves.list_leaves(employee_ids=employee_ids, status=status)

    def get_leave(self, *, caller: Caller, leave_id: int) -> LeaveRequest:
        resolve_scope(caller)
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        require_access(caller, self._owner(leave.employee_id), action="view this leave request")
        return leave

    def delete_leave(self, *, caller: Caller, leave_id: int) -> None:
        require_role(caller, Role.HR_ADMIN)
        if not self._leaves.delete(int(leave_id)):
            raise NotFoundError("Leave request not found")
        logger.info("Leave %s deleted by user %s", leave_id, caller.user_id)
