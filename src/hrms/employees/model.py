from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EmployeeStatus
from ..security.access import Owner


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee profile in the directory."""

    id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    date_of_joining: date
    department: str
    designation: str
    salary: float
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    phone: Optional[str] = None
    manager_user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def owner(self) -> Owner:
        return Owner(employee_id=self.id, manager_user_id=self.manager_user_id)


@dataclass(frozen=True)
class NewEmployee:
    employee_code: str
    first_name: str
    last_name: str
    email: str
    date_of_joining: date
    department: str
    designation: str
    salary: float
    phone: Optional[str] = None
    manager_user_id: Optional[int] = None
