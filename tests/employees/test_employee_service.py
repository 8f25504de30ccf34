from __future__ import annotations

from datetime import date

import pytest

from hrms.core.enums import EmployeeStatus
from hrms.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ProfileNotLinkedError,
    ValidationError,
)


@pytest.fixture()
def service(world):
    return world.container.employee_service


def _create(world, service, **overrides):
    params = dict(
        employee_code="EMP100",
        first_name="Chi",
        last_name="Le",
        email="chi@example.com",
        date_of_joining=date(2024, 1, 15),
        department="Finance",
        designation="Analyst",
        salary=42000,
    )
    params.update(overrides)
    return service.create(caller=world.caller_for(world.admin), **params)


def test_create_employee(world, service):
    emp = _create(world, service, manager_user_id=world.manager.user_id)
    assert emp.employee_code == "EMP100"
    assert emp.status == EmployeeStatus.ACTIVE
    assert emp.salary == 42000.0
    assert emp.manager_user_id == world.manager.user_id


def test_create_duplicate_code_or_email(world, service):
    with pytest.raises(ConflictError, match="already exists"):
        _create(world, service, employee_code="EMP001")
    with pytest.raises(ConflictError):
        _create(world, service, email="alice@example.com")


@pytest.mark.parametrize(
    "overrides",
    [
        {"first_name": ""},
        {"email": "nope"},
        {"salary": -1},
        {"salary": "lots"},
        {"date_of_joining": None},
        {"manager_user_id": 999},
    ],
)
def test_create_validation(world, service, overrides):
    with pytest.raises(ValidationError):
        _create(world, service, **overrides)


def test_only_hr_admin_creates(world, service):
    with pytest.raises(AuthorizationError):
        service.create(
            caller=world.caller_for(world.manager),
            employee_code="X",
            first_name="X",
            last_name="X",
            email="x@example.com",
            date_of_joining=date(2024, 1, 1),
            department="X",
            designation="X",
            salary=1,
        )


def test_get_scoping(world, service):
    assert service.get(caller=world.caller_for(world.alice), employee_id=world.alice_emp.id).id == world.alice_emp.id
    assert service.get(caller=world.caller_for(world.manager), employee_id=world.alice_emp.id)

    with pytest.raises(AuthorizationError):
        service.get(caller=world.caller_for(world.alice), employee_id=world.bob_emp.id)
    with pytest.raises(AuthorizationError):
        service.get(caller=world.caller_for(world.manager), employee_id=world.bob_emp.id)
    with pytest.raises(ProfileNotLinkedError):
        service.get(caller=world.caller_for(world.loner), employee_id=world.bob_emp.id)
    with pytest.raises(NotFoundError):
        service.get(caller=world.caller_for(world.admin), employee_id=999)


def test_list_scoping(world, service):
    assert {e.id for e in service.list_employees(caller=world.caller_for(world.admin))} == {
        world.alice_emp.id,
        world.bob_emp.id,
    }
    assert [e.id for e in service.list_employees(caller=world.caller_for(world.manager))] == [world.alice_emp.id]
    with pytest.raises(AuthorizationError):
        service.list_employees(caller=world.caller_for(world.alice))


def test_partial_update(world, service):
    admin = world.caller_for(world.admin)
    emp = service.update(caller=admin, employee_id=world.bob_emp.id, designation="Lead", salary=60000)
    assert emp.designation == "Lead"
    assert emp.salary == 60000.0
    assert emp.first_name == "Bob"

    with pytest.raises(ValidationError):
        service.update(caller=admin, employee_id=world.bob_emp.id, status="retired")
    with pytest.raises(ValidationError):
        service.update(caller=admin, employee_id=world.bob_emp.id, favourite_colour="blue")


def test_terminate_keeps_record_and_hides_from_list(world, service):
    admin = world.caller_for(world.admin)
    emp = service.terminate(caller=admin, employee_id=world.bob_emp.id)
    assert emp.status == EmployeeStatus.TERMINATED
    assert service.get(caller=admin, employee_id=world.bob_emp.id).status == EmployeeStatus.TERMINATED
    assert world.bob_emp.id not in {e.id for e in service.list_employees(caller=admin)}
