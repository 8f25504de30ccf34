from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        applied_at: datetime,
    ) -> int:
        """Insert a new request in ``pending``."""

        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: int,
        expected_status: LeaveStatus,
        status: LeaveStatus,
        approved_by: int,
        approval_date: datetime,
    ) -> bool:
        """Compare-and-set: only applies while the row is still in ``expected_status``."""

        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError
