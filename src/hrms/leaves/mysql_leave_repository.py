from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "leave_id, employee_id, leave_type, start_date, end_date, reason, status, "
    "applied_at, approved_by, approval_date"
)


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_at=r["applied_at"],
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approval_date=r.get("approval_date"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status, applied_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    LeaveStatus.PENDING.value,
                    applied_at,
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        leave_id: int,
        expected_status: LeaveStatus,
        status: LeaveStatus,
        approved_by: int,
        approval_date: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approval_date=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, int(approved_by), approval_date, int(leave_id), expected_status.value),
            )
            return cur.rowcount > 0

    def list_leaves(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(employee_ids))})")
            params.extend(int(i) for i in employee_ids)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests {where} ORDER BY applied_at DESC, leave_id DESC",
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            return cur.rowcount > 0
