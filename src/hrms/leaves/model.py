from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    applied_at: datetime
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
