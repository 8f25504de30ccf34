from __future__ import annotations

from typing import Mapping

from ..core.enums import LeaveStatus
from ..core.exceptions import InvalidTransitionError

# Every legal leave status change. Anything missing here is rejected.
ALLOWED_TRANSITIONS: Mapping[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: LeaveStatus, target: LeaveStatus) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
