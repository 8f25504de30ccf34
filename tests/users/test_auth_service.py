from __future__ import annotations

import pytest

from hrms.core.enums import Role
from hrms.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture()
def auth(world):
    return world.container.auth_service


def test_register_defaults_to_employee_and_issues_token(world, auth):
    result = auth.register(name="New Person", email="New@Example.com", password="secret123")
    assert result.user.role == Role.EMPLOYEE
    assert result.user.email == "new@example.com"
    assert result.user.password_hash != "secret123"
    assert result.expires_in == 3600
    assert world.container.token_service.verify(result.token).user_id == result.user.user_id


def test_register_duplicate_email(auth):
    with pytest.raises(ConflictError):
        auth.register(name="Again", email="alice.user@example.com", password="secret123")


@pytest.mark.parametrize(
    "name, email, password",
    [
        ("", "x@example.com", "secret123"),
        ("X", "not-an-email", "secret123"),
        ("X", "x@example.com", "short"),
    ],
)
def test_register_validation(auth, name, email, password):
    with pytest.raises(ValidationError):
        auth.register(name=name, email=email, password=password)


def test_login(auth):
    result = auth.login(email="alice.user@example.com", password="secret123")
    assert result.user.email == "alice.user@example.com"

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login(email="alice.user@example.com", password="nope")
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth.login(email="ghost@example.com", password="secret123")


def test_resolve_caller_reads_current_role_and_link(world, auth):
    token = world.token_for(world.alice)
    world.container.users_repo.update_access(world.alice.user_id, role=Role.MANAGER, employee_id=None)

    caller = auth.resolve_caller(token)
    assert caller.role == Role.MANAGER
    assert caller.employee_id is None


def test_resolve_caller_for_deleted_user(world, auth, token_service):
    with pytest.raises(AuthenticationError):
        auth.resolve_caller(token_service.issue(999, Role.EMPLOYEE))


def test_update_access_links_and_unlinks(world):
    users = world.container.user_service
    admin = world.caller_for(world.admin)

    updated = users.update_access(caller=admin, user_id=world.loner.user_id, employee_id=world.bob_emp.id)
    assert updated.employee_id == world.bob_emp.id

    updated = users.update_access(caller=admin, user_id=world.loner.user_id, role=Role.MANAGER)
    assert updated.role == Role.MANAGER
    assert updated.employee_id == world.bob_emp.id

    updated = users.update_access(caller=admin, user_id=world.loner.user_id, unlink=True)
    assert updated.employee_id is None


def test_update_access_rules(world):
    users = world.container.user_service
    with pytest.raises(AuthorizationError):
        users.update_access(caller=world.caller_for(world.manager), user_id=world.loner.user_id, role=Role.HR_ADMIN)
    with pytest.raises(ValidationError):
        users.update_access(caller=world.caller_for(world.admin), user_id=world.loner.user_id, employee_id=999)
    with pytest.raises(NotFoundError):
        users.update_access(caller=world.caller_for(world.admin), user_id=999, role=Role.MANAGER)


def test_list_users_roles(world):
    users = world.container.user_service
    assert len(users.list_users(caller=world.caller_for(world.manager))) == 5
    with pytest.raises(AuthorizationError):
        users.list_users(caller=world.caller_for(world.alice))
