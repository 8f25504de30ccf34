from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import WorkedHoursPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_TTL_MINUTES, FULL_DAY_HOURS, HALF_DAY_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .security.tokens import TokenService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository

    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService


def assemble(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    token_service: TokenService,
    policy: WorkedHoursPolicy | None = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        token_service=token_service,
        auth_service=AuthService(users_repo, token_service),
        user_service=UserService(users_repo, employees_repo),
        employee_service=EmployeeService(employees_repo, users_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, policy=policy),
        leave_service=LeaveService(leaves_repo, employees_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
    half_day_hours: float = HALF_DAY_HOURS,
    full_day_hours: float = FULL_DAY_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        token_service=TokenService(jwt_secret, ttl_minutes=token_ttl_minutes),
        policy=WorkedHoursPolicy(half_day_hours=float(half_day_hours), full_day_hours=float(full_day_hours)),
        conn=conn,
    )
