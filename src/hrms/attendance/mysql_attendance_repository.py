from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, work_date, check_in_time, check_out_time, "
    "hours_worked, status, notes, created_at, updated_at"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        hours_worked=float(r.get("hours_worked") or 0),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in_time, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in_time, status.value),
            )
            return int(cur.lastrowid)

    def set_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL AND check_out_time IS NULL
                """,
                (check_in_time, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def set_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        hours_worked: float,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, hours_worked=%s, status=%s
                WHERE attendance_id=%s AND check_out_time IS NULL AND check_in_time IS NOT NULL
                """,
                (check_out_time, hours_worked, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

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
        # LAST_INSERT_ID(expr) makes lastrowid point at the updated row as well.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in_time, check_out_time, hours_worked, status, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    hours_worked=VALUES(hours_worked),
                    status=VALUES(status),
                    notes=COALESCE(VALUES(notes), notes)
                """,
                (int(employee_id), work_date, check_in_time, check_out_time, hours_worked, status.value, notes),
            )
            return int(cur.lastrowid)

    def list_records(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(employee_ids))})")
            params.extend(int(i) for i in employee_ids)
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records {where} ORDER BY work_date DESC, employee_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
