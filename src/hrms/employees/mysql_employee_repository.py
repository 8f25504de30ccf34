from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = (
    "id, employee_code, first_name, last_name, email, phone, date_of_joining, "
    "department, designation, salary, status, manager_user_id, created_at, updated_at"
)

# Columns an update may touch; keys come from the service, never from the request.
_UPDATABLE = {
    "first_name",
    "last_name",
    "email",
    "phone",
    "date_of_joining",
    "department",
    "designation",
    "salary",
    "status",
    "manager_user_id",
}


def _to_employee(row: dict) -> Employee:
    return Employee(
        id=int(row["id"]),
        employee_code=row["employee_code"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row.get("phone"),
        date_of_joining=row["date_of_joining"],
        department=row["department"],
        designation=row["designation"],
        salary=float(row["salary"]),
        status=EmployeeStatus(row["status"]),
        manager_user_id=int(row["manager_user_id"]) if row.get("manager_user_id") is not None else None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def find_by_code_or_email(self, *, employee_code: str, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s OR email=%s LIMIT 1",
                (employee_code, email),
            )
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def create(self, data: NewEmployee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_code, first_name, last_name, email, phone, date_of_joining,
                    department, designation, salary, status, manager_user_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.employee_code,
                    data.first_name,
                    data.last_name,
                    data.email,
                    data.phone,
                    data.date_of_joining,
                    data.department,
                    data.designation,
                    data.salary,
                    EmployeeStatus.ACTIVE.value,
                    data.manager_user_id,
                ),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, changes: Mapping[str, Any]) -> bool:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported employee columns: {sorted(unknown)}")
        if not changes:
            return True

        assignments = ", ".join(f"{col}=%s" for col in changes)
        params = [v.value if isinstance(v, EmployeeStatus) else v for v in changes.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE id=%s",
                (*params, int(employee_id)),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET status=%s WHERE id=%s", (status.value, int(employee_id)))
            return cur.rowcount > 0

    def list_all(
        self,
        *,
        manager_user_id: Optional[int] = None,
        include_terminated: bool = False,
    ) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []
        if not include_terminated:
            clauses.append("status<>%s")
            params.append(EmployeeStatus.TERMINATED.value)
        if manager_user_id is not None:
            clauses.append("manager_user_id=%s")
            params.append(int(manager_user_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY last_name, first_name", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_ids_by_manager(self, manager_user_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM employees WHERE manager_user_id=%s", (int(manager_user_id),))
            return [int(r["id"]) for r in fetchall(cur)]
