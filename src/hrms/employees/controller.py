from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_caller, iso, json_body, login_required, optional_int
from ..container import Container
from .model import Employee


def employee_to_json(e: Employee) -> dict:
    return {
        "id": e.id,
        "employeeId": e.employee_code,
        "firstName": e.first_name,
        "lastName": e.last_name,
        "fullName": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "dateOfJoining": iso(e.date_of_joining),
        "department": e.department,
        "designation": e.designation,
        "salary": e.salary,
        "status": e.status.value,
        "manager": e.manager_user_id,
        "createdAt": iso(e.created_at),
        "updatedAt": iso(e.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service.resolve_caller)
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @auth_required
    def employees_list():
        return jsonify([employee_to_json(e) for e in service.list_employees(caller=current_caller())])

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @auth_required
    def employees_get(employee_id: int):
        return jsonify(employee_to_json(service.get(caller=current_caller(), employee_id=employee_id)))

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @auth_required
    def employees_create():
        data = json_body()
        employee = service.create(
            caller=current_caller(),
            employee_code=data.get("employeeId", ""),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
            date_of_joining=parse_optional_date(data.get("dateOfJoining")),
            department=data.get("department", ""),
            designation=data.get("designation", ""),
            salary=data.get("salary"),
            manager_user_id=optional_int(data.get("manager"), "manager"),
        )
        return jsonify(employee_to_json(employee)), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @auth_required
    def employees_update(employee_id: int):
        data = json_body()
        employee = service.update(
            caller=current_caller(),
            employee_id=employee_id,
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            phone=data.get("phone"),
            date_of_joining=parse_optional_date(data.get("dateOfJoining")),
            department=data.get("department"),
            designation=data.get("designation"),
            salary=data.get("salary"),
            status=data.get("status"),
            manager_user_id=optional_int(data.get("manager"), "manager"),
        )
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @auth_required
    def employees_delete(employee_id: int):
        employee = service.terminate(caller=current_caller(), employee_id=employee_id)
        return jsonify(
            {
                "message": "Employee removed successfully (status set to terminated)",
                "employee": employee_to_json(employee),
            }
        )
