from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import day_key, now_local
from ..core.enums import AttendanceStatus, EmployeeStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateAttendanceError,
    NotFoundError,
    ValidationError,
)
from ..database.errors import DuplicateKeyError
from ..employees.repository import EmployeeRepository
from ..security.access import Caller, Scope, require_access, require_linked_profile, require_role, resolve_scope
from .model import AttendanceRecord
from .policy import WorkedHoursPolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        policy: WorkedHoursPolicy | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policy = policy or WorkedHoursPolicy()

    def _self_employee_id(self, caller: Caller) -> int:
        employee_id = require_linked_profile(caller)
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee profile not found for this user")
        if employee.status == EmployeeStatus.TERMINATED:
            raise AuthorizationError("Terminated employees cannot record attendance")
        return employee.id

    def check_in(self, *, caller: Caller, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = day_key(now)
        employee_id = self._self_employee_id(caller)

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.check_in_time is not None:
            raise ConflictError("Already checked in for today")
        if existing and existing.check_out_time is not None:
            raise ConflictError("Already checked out for today")

        if existing:
            # Row created earlier by manual entry (e.g. marked absent) with neither time set.
            if not self._attendance.set_checkin(
                attendance_id=existing.attendance_id,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
            ):
                raise ConflictError("Already checked in for today")
            attendance_id = existing.attendance_id
        else:
            try:
                attendance_id = self._attendance.insert_checkin(
                    employee_id=employee_id,
                    work_date=today,
                    check_in_time=now,
                    status=AttendanceStatus.PRESENT,
                )
            except DuplicateKeyError:
                logger.warning("Concurrent check-in rejected for employee %s on %s", employee_id, today)
                raise DuplicateAttendanceError()

        logger.info("Employee %s checked in at %s", employee_id, now.isoformat())
        return self._attendance.get_by_id(attendance_id)

    def check_out(self, *, caller: Caller, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = day_key(now)
        employee_id = self._self_employee_id(caller)

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if not record:
            raise ConflictError("No check-in record found for today")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out for today")
        if record.check_in_time is None:
            raise ConflictError("Cannot check out without a check-in time")

        decision = self._policy.decide_checkout(check_in=record.check_in_time, check_out=now)
        if not self._attendance.set_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            hours_worked=decision.hours_worked,
            status=decision.status,
        ):
            raise ConflictError("Already checked out for today")

        logger.info(
            "Employee %s checked out at %s (%.2fh, %s)",
            employee_id,
            now.isoformat(),
            decision.hours_worked,
            decision.status.value,
        )
        return self._attendance.get_by_id(record.attendance_id)

    def today(self, *, caller: Caller, now: datetime | None = None) -> Optional[AttendanceRecord]:
        """Get today's attendance record for the caller"""
        employee_id = require_linked_profile(caller)
        return self._attendance.get_for_employee_and_date(employee_id, day_key(now or now_local()))

    def manual_upsert(
        self,
        *,
        caller: Caller,
        employee_id: Optional[int],
        day: Optional[date | datetime],
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        status: Optional[AttendanceStatus] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Administrative add/edit of one employee's day.

        The given times replace the stored ones (missing means cleared);
        missing notes keep the stored notes.
        """
        require_role(caller, Role.HR_ADMIN)

        if employee_id is None or day is None:
            raise ValidationError("Employee ID and Date are required")
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        work_date = day_key(day)
        decision = self._policy.decide_manual(check_in=check_in, check_out=check_out, override=status)
        notes = (notes or "").strip() or None

        try:
            attendance_id = self._attendance.upsert_manual(
                employee_id=employee.id,
                work_date=work_date,
                check_in_time=check_in,
                check_out_time=check_out,
                hours_worked=decision.hours_worked,
                status=decision.status,
                notes=notes,
            )
        except DuplicateKeyError:
            raise DuplicateAttendanceError(
                "An attendance record for this employee on this date already exists"
            )

        logger.info(
            "Manual attendance for employee %s on %s by user %s: %s",
            employee.id,
            work_date,
            caller.user_id,
            decision.status.value,
        )
        return self._attendance.get_by_id(attendance_id)

    def list_records(
        self,
        *,
        caller: Caller,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        scope = resolve_scope(caller)
        if scope == Scope.ALL:
            employee_ids = [int(employee_id)] if employee_id is not None else None
        elif scope == Scope.DIRECT_REPORTS:
            reports = list(self._employees.list_ids_by_manager(caller.user_id))
            if employee_id is not None:
                if int(employee_id) not in reports:
                    raise AuthorizationError("Not authorized to view this employee's attendance")
                employee_ids = [int(employee_id)]
            else:
                employee_ids = reports
        else:
            if employee_id is not None and int(employee_id) != caller.employee_id:
                raise AuthorizationError("Not authorized to view this employee's attendance")
            employee_ids = [caller.employee_id]

        return self._attendance.list_records(employee_ids=employee_ids, start_date=start_date, end_date=end_date)

    def list_for_employee(self, *, caller: Caller, employee_id: int) -> Sequence[AttendanceRecord]:
        resolve_scope(caller)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        require_access(caller, employee.owner(), action="view this employee's attendance records")
        return self._attendance.list_records(employee_ids=[employee.id])

    def delete_record(self, *, caller: Caller, attendance_id: int) -> None:
        require_role(caller, Role.HR_ADMIN)
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted by user %s", attendance_id, caller.user_id)
