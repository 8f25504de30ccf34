from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_TTL_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthenticationError

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    role: Role


class TokenService:
    """Issue and verify signed bearer tokens carrying (user id, role)."""

    def __init__(self, secret: str, *, ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(minutes=int(ttl_minutes))

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, user_id: int, role: Role, *, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(int(user_id)),
            "role": Role(role).value,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        try:
            return TokenPayload(user_id=int(payload["sub"]), role=Role(payload["role"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc
