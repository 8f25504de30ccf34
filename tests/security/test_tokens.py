from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from hrms.core.enums import Role
from hrms.core.exceptions import AuthenticationError
from hrms.security.passwords import hash_password, verify_password
from hrms.security.tokens import TokenService


def test_issue_and_verify(token_service):
    token = token_service.issue(7, Role.MANAGER)
    payload = token_service.verify(token)
    assert payload.user_id == 7
    assert payload.role == Role.MANAGER


def test_ttl_seconds():
    assert TokenService("s", ttl_minutes=30).ttl_seconds == 1800


def test_expired_token_rejected(token_service):
    token = token_service.issue(7, Role.EMPLOYEE, now=datetime.now(timezone.utc) - timedelta(hours=2))
    with pytest.raises(AuthenticationError, match="expired"):
        token_service.verify(token)


def test_tampered_or_foreign_token_rejected(token_service):
    other = TokenService("another-secret", ttl_minutes=60)
    with pytest.raises(AuthenticationError, match="Invalid token"):
        token_service.verify(other.issue(7, Role.HR_ADMIN))
    with pytest.raises(AuthenticationError):
        token_service.verify("not-a-jwt")


def test_token_without_role_rejected(token_service):
    token = jwt.encode({"sub": "7", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}, "test-jwt-secret")
    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_empty_secret_not_allowed():
    with pytest.raises(ValueError):
        TokenService("")


def test_password_hashing():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("secret123", "")
