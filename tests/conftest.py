from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import date, datetime

import pytest

from hrms.attendance.model import AttendanceRecord
from hrms.container import Container, assemble
from hrms.core.enums import EmployeeStatus, LeaveStatus, Role
from hrms.database.errors import DuplicateKeyError
from hrms.employees.model import Employee, NewEmployee
from hrms.leaves.model import LeaveRequest
from hrms.security.access import Caller
from hrms.security.passwords import hash_password
from hrms.security.tokens import TokenService
from hrms.users.model import User


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, User] = {}

    def add(self, *, name, email, password="secret123", role=Role.EMPLOYEE, employee_id=None) -> User:
        uid = self.create_user(name=name, email=email, password_hash=hash_password(password), role=role)
        if employee_id is not None:
            self.update_access(uid, role=role, employee_id=employee_id)
        return self._rows[uid]

    def get_by_id(self, user_id):
        return self._rows.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._rows.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role):
        if self.get_by_email(email):
            raise DuplicateKeyError("Duplicate entry", key="uq_users_email")
        uid = self._next_id
        self._next_id += 1
        self._rows[uid] = User(
            user_id=uid,
            name=name,
            email=email,
            password_hash=password_hash,
            role=Role(role),
            created_at=datetime(2024, 1, 1, 9, 0, 0),
        )
        return uid

    def update_access(self, user_id, *, role, employee_id):
        user = self._rows.get(int(user_id))
        if not user:
            return False
        self._rows[user.user_id] = replace(user, role=Role(role), employee_id=employee_id)
        return True

    def list_all(self):
        return sorted(self._rows.values(), key=lambda u: u.user_id, reverse=True)


class FakeEmployeesRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, Employee] = {}

    def get_by_id(self, employee_id):
        return self._rows.get(int(employee_id))

    def find_by_code_or_email(self, *, employee_code, email):
        return next((e for e in self._rows.values() if e.employee_code == employee_code or e.email == email), None)

    def create(self, data):
        if self.find_by_code_or_email(employee_code=data.employee_code, email=data.email):
            raise DuplicateKeyError("Duplicate entry", key="uq_employees_code")
        eid = self._next_id
        self._next_id += 1
        self._rows[eid] = Employee(
            id=eid,
            employee_code=data.employee_code,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            date_of_joining=data.date_of_joining,
            department=data.department,
            designation=data.designation,
            salary=data.salary,
            manager_user_id=data.manager_user_id,
        )
        return eid

    def update(self, employee_id, changes):
        employee = self._rows.get(int(employee_id))
        if not employee:
            return False
        self._rows[employee.id] = replace(employee, **dict(changes))
        return True

    def set_status(self, employee_id, status):
        return self.update(employee_id, {"status": status})

    def list_all(self, *, manager_user_id=None, include_terminated=False):
        rows = [
            e
            for e in self._rows.values()
            if (include_terminated or e.status != EmployeeStatus.TERMINATED)
            and (manager_user_id is None or e.manager_user_id == manager_user_id)
        ]
        return sorted(rows, key=lambda e: (e.last_name, e.first_name))

    def list_ids_by_manager(self, manager_user_id):
        return [e.id for e in self._rows.values() if e.manager_user_id == manager_user_id]


class FakeAttendanceRepo:
    """In-memory ledger with the same unique (employee_id, work_date) rule as the table."""

    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self._rows: dict[int, AttendanceRecord] = {}
        self._by_day: dict[tuple[int, date], int] = {}

    def get_by_id(self, attendance_id):
        return self._rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        aid = self._by_day.get((int(employee_id), work_date))
        return self._rows.get(aid) if aid else None

    def _insert(self, record_kwargs) -> int:
        key = (record_kwargs["employee_id"], record_kwargs["work_date"])
        if key in self._by_day:
            raise DuplicateKeyError("Duplicate entry", key="uq_attendance_employee_day")
        aid = self._next_id
        self._next_id += 1
        self._rows[aid] = AttendanceRecord(attendance_id=aid, **record_kwargs)
        self._by_day[key] = aid
        return aid

    def insert_checkin(self, *, employee_id, work_date, check_in_time, status):
        with self._lock:
            return self._insert(
                dict(
                    employee_id=employee_id,
                    work_date=work_date,
                    check_in_time=check_in_time,
                    check_out_time=None,
                    status=status,
                )
            )

    def set_checkin(self, *, attendance_id, check_in_time, status):
        with self._lock:
            row = self._rows.get(attendance_id)
            if not row or row.check_in_time is not None or row.check_out_time is not None:
                return False
            self._rows[attendance_id] = replace(row, check_in_time=check_in_time, status=status)
            return True

    def set_checkout(self, *, attendance_id, check_out_time, hours_worked, status):
        with self._lock:
            row = self._rows.get(attendance_id)
            if not row or row.check_out_time is not None or row.check_in_time is None:
                return False
            self._rows[attendance_id] = replace(
                row, check_out_time=check_out_time, hours_worked=hours_worked, status=status
            )
            return True

    def upsert_manual(self, *, employee_id, work_date, check_in_time, check_out_time, hours_worked, status, notes=None):
        with self._lock:
            aid = self._by_day.get((employee_id, work_date))
            if aid is None:
                return self._insert(
                    dict(
                        employee_id=employee_id,
                        work_date=work_date,
                        check_in_time=check_in_time,
                        check_out_time=check_out_time,
                        hours_worked=hours_worked,
                        status=status,
                        notes=notes,
                    )
                )
            row = self._rows[aid]
            self._rows[aid] = replace(
                row,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                hours_worked=hours_worked,
                status=status,
                notes=notes if notes is not None else row.notes,
            )
            return aid

    def list_records(self, *, employee_ids=None, start_date=None, end_date=None):
        if employee_ids is not None and not employee_ids:
            return []
        rows = [
            r
            for r in self._rows.values()
            if (employee_ids is None or r.employee_id in employee_ids)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        rows.sort(key=lambda r: r.employee_id)
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows

    def delete(self, attendance_id):
        with self._lock:
            row = self._rows.pop(int(attendance_id), None)
            if not row:
                return False
            self._by_day.pop((row.employee_id, row.work_date), None)
            return True


class FakeLeavesRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self._rows: dict[int, LeaveRequest] = {}

    def get_by_id(self, leave_id):
        return self._rows.get(int(leave_id))

    def create(self, *, employee_id, leave_type, start_date, end_date, reason, applied_at):
        lid = self._next_id
        self._next_id += 1
        self._rows[lid] = LeaveRequest(
            leave_id=lid,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_at=applied_at,
        )
        return lid

    def decide(self, *, leave_id, expected_status, status, approved_by, approval_date):
        with self._lock:
            row = self._rows.get(int(leave_id))
            if not row or row.status != expected_status:
                return False
            self._rows[row.leave_id] = replace(
                row, status=status, approved_by=approved_by, approval_date=approval_date
            )
            return True

    def list_leaves(self, *, employee_ids=None, status=None):
        if employee_ids is not None and not employee_ids:
            return []
        rows = [
            r
            for r in self._rows.values()
            if (employee_ids is None or r.employee_id in employee_ids) and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: (r.applied_at, r.leave_id), reverse=True)
        return rows

    def delete(self, leave_id):
        return self._rows.pop(int(leave_id), None) is not None


@dataclass
class World:
    """A small organisation: one HR admin, one manager with one report, one unmanaged employee."""

    container: Container
    admin: User
    manager: User
    alice: User
    bob: User
    loner: User
    alice_emp: Employee
    bob_emp: Employee

    @staticmethod
    def caller_for(user: User) -> Caller:
        return Caller(user_id=user.user_id, role=user.role, employee_id=user.employee_id)

    def token_for(self, user: User) -> str:
        return self.container.token_service.issue(user.user_id, user.role)


def _employee(repo: FakeEmployeesRepo, code, first, last, manager_user_id=None) -> Employee:
    eid = repo.create(
        NewEmployee(
            employee_code=code,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}@example.com",
            date_of_joining=date(2023, 3, 1),
            department="Engineering",
            designation="Developer",
            salary=50000.0,
            manager_user_id=manager_user_id,
        )
    )
    return repo.get_by_id(eid)


@pytest.fixture()
def token_service():
    return TokenService("test-jwt-secret", ttl_minutes=60)


@pytest.fixture()
def world(token_service) -> World:
    users = FakeUsersRepo()
    employees = FakeEmployeesRepo()

    admin = users.add(name="Hana Admin", email="hr@example.com", role=Role.HR_ADMIN)
    manager = users.add(name="Minh Manager", email="manager@example.com", role=Role.MANAGER)

    alice_emp = _employee(employees, "EMP001", "Alice", "Nguyen", manager_user_id=manager.user_id)
    bob_emp = _employee(employees, "EMP002", "Bob", "Tran")

    alice = users.add(name="Alice Nguyen", email="alice.user@example.com", employee_id=alice_emp.id)
    bob = users.add(name="Bob Tran", email="bob.user@example.com", employee_id=bob_emp.id)
    loner = users.add(name="No Profile", email="loner@example.com")

    container = assemble(
        users_repo=users,
        employees_repo=employees,
        attendance_repo=FakeAttendanceRepo(),
        leaves_repo=FakeLeavesRepo(),
        token_service=token_service,
    )
    return World(
        container=container,
        admin=admin,
        manager=manager,
        alice=alice,
        bob=bob,
        loner=loner,
        alice_emp=alice_emp,
        bob_emp=bob_emp,
    )


@pytest.fixture()
def client(world, monkeypatch):
    from hrms.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=world.container)
    return app.test_client()


@pytest.fixture()
def auth_headers(world):
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {world.token_for(user)}"}

    return _headers
