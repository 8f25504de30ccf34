from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance storage keyed by id, unique on (employee_id, work_date)."""

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> int:
        """Insert-if-absent; raises DuplicateKeyError if the day already has a row."""

        raise NotImplementedError

    def set_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus) -> bool:
        """Fill check-in on an existing row only while both times are still empty."""

        raise NotImplementedError

    def set_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        hours_worked: float,
        status: AttendanceStatus,
    ) -> bool:
        """Fill check-out only while it is empty and a check-in exists."""

        raise NotImplementedError

    def upsert_manual(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        hours_worked: float,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> int:
        """Atomic insert-or-update on (employee_id, work_date); returns the row id.

        ``notes=None`` keeps the stored notes of an existing row.
        """

        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest day first. ``employee_ids=None`` means no employee filter."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
