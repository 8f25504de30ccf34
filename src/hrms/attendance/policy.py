from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import FULL_DAY_HOURS, HALF_DAY_HOURS, HOURS_PRECISION
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

_SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    hours_worked: float = 0.0


def worked_seconds(check_in: datetime, check_out: datetime) -> float:
    if check_out < check_in:
        raise ValidationError("Check-out time cannot be before check-in time")
    return (check_out - check_in).total_seconds()


@dataclass(frozen=True)
class WorkedHoursPolicy:
    """Decide attendance status from worked duration.

    Boundaries are lower-bound inclusive: below ``half_day_hours`` is
    partial-present, below ``full_day_hours`` is half-day, anything else is
    present. The comparison uses the exact duration, not the rounded hours.
    """

    half_day_hours: float = HALF_DAY_HOURS
    full_day_hours: float = FULL_DAY_HOURS

    def __post_init__(self):
        if not 0 < self.half_day_hours < self.full_day_hours:
            raise ValueError("Expected 0 < half_day_hours < full_day_hours")

    def status_for(self, seconds: float) -> AttendanceStatus:
        if seconds < self.half_day_hours * _SECONDS_PER_HOUR:
            return AttendanceStatus.PARTIAL_PRESENT
        if seconds < self.full_day_hours * _SECONDS_PER_HOUR:
            return AttendanceStatus.HALF_DAY
        return AttendanceStatus.PRESENT

    def decide_checkout(self, *, check_in: datetime, check_out: datetime) -> StatusDecision:
        seconds = worked_seconds(check_in, check_out)
        return StatusDecision(status=self.status_for(seconds), hours_worked=_to_hours(seconds))

    def decide_manual(
        self,
        *,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        override: Optional[AttendanceStatus] = None,
    ) -> StatusDecision:
        """Administrative entry: both times mean present, one time means partial-entry.

        An explicit ``override`` always wins; duration is still computed.
        """
        if check_in and check_out:
            hours = _to_hours(worked_seconds(check_in, check_out))
            return StatusDecision(status=override or AttendanceStatus.PRESENT, hours_worked=hours)
        if check_in or check_out:
            return StatusDecision(status=override or AttendanceStatus.PARTIAL_ENTRY)
        return StatusDecision(status=override or AttendanceStatus.ABSENT)


def _to_hours(seconds: float) -> float:
    return round(seconds / _SECONDS_PER_HOUR, HOURS_PRECISION)
