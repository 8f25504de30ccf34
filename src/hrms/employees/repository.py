from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_code_or_email(self, *, employee_code: str, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, data: NewEmployee) -> int:
        """Insert a profile; raises DuplicateKeyError on code/email collision."""

        raise NotImplementedError

    def update(self, employee_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        raise NotImplementedError

    def list_all(
        self,
        *,
        manager_user_id: Optional[int] = None,
        include_terminated: bool = False,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def list_ids_by_manager(self, manager_user_id: int) -> Sequence[int]:
        """Ids of every direct report, terminated ones included (their history stays visible)."""

        raise NotImplementedError
