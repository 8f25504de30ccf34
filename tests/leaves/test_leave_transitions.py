from __future__ import annotations

import pytest

from hrms.core.enums import LeaveStatus
from hrms.core.exceptions import InvalidTransitionError
from hrms.leaves.transitions import can_transition, ensure_transition


@pytest.mark.parametrize(
    "current, target",
    [
        (LeaveStatus.PENDING, LeaveStatus.APPROVED),
        (LeaveStatus.PENDING, LeaveStatus.REJECTED),
        (LeaveStatus.PENDING, LeaveStatus.CANCELLED),
        (LeaveStatus.APPROVED, LeaveStatus.CANCELLED),
    ],
)
def test_allowed(current, target):
    assert can_transition(current, target)
    ensure_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        (LeaveStatus.PENDING, LeaveStatus.PENDING),
        (LeaveStatus.APPROVED, LeaveStatus.REJECTED),
        (LeaveStatus.APPROVED, LeaveStatus.APPROVED),
        (LeaveStatus.REJECTED, LeaveStatus.APPROVED),
        (LeaveStatus.CANCELLED, LeaveStatus.PENDING),
    ],
)
def test_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransitionError) as exc:
        ensure_transition(current, target)
    assert exc.value.current == current
    assert exc.value.target == target
    assert str(exc.value) == f"Invalid transition from {current.value}"
