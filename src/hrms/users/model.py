from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: login identity.

    Note: plain data object, no database access here. ``employee_id`` links the
    account to an employee profile; the profile does not depend on the account.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None
    created_at: Optional[datetime] = None
