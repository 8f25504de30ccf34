from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..database.errors import DuplicateKeyError
from ..employees.repository import EmployeeRepository
from ..security.access import Caller, require_role
from ..security.passwords import hash_password, verify_password
from ..security.tokens import TokenService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """What login/register hand back to the client."""

    user: User
    token: str
    expires_in: int


class AuthService:
    """Use case: register, log in, and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(self, *, name: str, email: str, password: str, role: Optional[Role] = None) -> AuthResult:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = Role(role) if role else Role.EMPLOYEE

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user_id = self._users.create_user(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=role,
            )
        except DuplicateKeyError:
            raise ConflictError("User with this email already exists")

        user = self._users.get_by_id(user_id)
        logger.info("Registered user %s (%s) as %s", user_id, email, role.value)
        return self._issue(user)

    def login(self, *, email: str, password: str) -> AuthResult:
        normalized = (email or "").strip().lower()
        user = self._users.get_by_email(normalized) if normalized else None
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", normalized or "<empty>")
            raise AuthenticationError("Invalid credentials")
        return self._issue(user)

    def resolve_caller(self, token: str) -> Caller:
        """Verify a bearer token and build the caller for this request.

        Role and employee link are read from the stored user so that changes
        made by an administrator apply without waiting for token expiry.
        """
        payload = self._tokens.verify(token)
        user = self._users.get_by_id(payload.user_id)
        if not user:
            raise AuthenticationError("Not authorized, token failed")
        return Caller(user_id=user.user_id, role=user.role, employee_id=user.employee_id)

    def _issue(self, user: User) -> AuthResult:
        token = self._tokens.issue(user.user_id, user.role)
        return AuthResult(user=user, token=token, expires_in=self._tokens.ttl_seconds)


class UserService:
    """Use case: manage accounts (hr_admin) and read one's own account."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    def me(self, *, caller: Caller) -> User:
        user = self._users.get_by_id(caller.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, caller: Caller) -> Sequence[User]:
        require_role(caller, Role.HR_ADMIN, Role.MANAGER)
        return self._users.list_all()

    def update_access(
        self,
        *,
        caller: Caller,
        user_id: int,
        role: Optional[Role] = None,
        employee_id: Optional[int] = None,
        unlink: bool = False,
    ) -> User:
        """Change a user's role and/or employee link.

        ``employee_id=None`` keeps the current link unless ``unlink`` is set.
        """
        require_role(caller, Role.HR_ADMIN)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        new_role = Role(role) if role else user.role
        new_link = user.employee_id
        if unlink:
            new_link = None
        elif employee_id is not None:
            if not self._employees.get_by_id(int(employee_id)):
                raise ValidationError("Linked employee does not exist")
            new_link = int(employee_id)

        self._users.update_access(user.user_id, role=new_role, employee_id=new_link)
        logger.info(
            "User %s updated by %s: role=%s employee=%s", user.user_id, caller.user_id, new_role.value, new_link
        )
        return self._users.get_by_id(user.user_id)
