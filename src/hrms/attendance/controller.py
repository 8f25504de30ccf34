from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date, parse_optional_datetime
from ..common.validators import require_enum
from ..common.web import current_caller, iso, json_body, login_required, optional_int
from ..container import Container
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


def attendance_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "employee": r.employee_id,
        "date": iso(r.work_date),
        "checkInTime": iso(r.check_in_time),
        "checkOutTime": iso(r.check_out_time),
        "hoursWorked": r.hours_worked,
        "status": r.status.value,
        "notes": r.notes,
        "createdAt": iso(r.created_at),
        "updatedAt": iso(r.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service.resolve_caller)
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @auth_required
    def attendance_check_in():
        record = service.check_in(caller=current_caller())
        return jsonify({"message": "Check-in successful!", "attendance": attendance_to_json(record)}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @auth_required
    def attendance_check_out():
        record = service.check_out(caller=current_caller())
        return jsonify({"message": "Check-out successful!", "attendance": attendance_to_json(record)})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @auth_required
    def attendance_today():
        record = service.today(caller=current_caller())
        return jsonify({"attendance": attendance_to_json(record) if record else None})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @auth_required
    def attendance_list():
        records = service.list_records(
            caller=current_caller(),
            employee_id=optional_int(request.args.get("employeeId"), "employeeId"),
            start_date=parse_optional_date(request.args.get("startDate")),
            end_date=parse_optional_date(request.args.get("endDate")),
        )
        return jsonify([attendance_to_json(r) for r in records])

    @app.route("/api/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_for_employee")
    @auth_required
    def attendance_for_employee(employee_id: int):
        records = service.list_for_employee(caller=current_caller(), employee_id=employee_id)
        return jsonify([attendance_to_json(r) for r in records])

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="attendance_manual")
    @auth_required
    def attendance_manual():
        data = json_body()
        status = require_enum(AttendanceStatus, data["status"], "status") if data.get("status") else None
        record = service.manual_upsert(
            caller=current_caller(),
            employee_id=optional_int(data.get("employee"), "employee"),
            day=parse_optional_date(data.get("date")),
            check_in=parse_optional_datetime(data.get("checkInTime")),
            check_out=parse_optional_datetime(data.get("checkOutTime")),
            status=status,
            notes=data.get("notes"),
        )
        return jsonify({"message": "Attendance updated successfully!", "attendance": attendance_to_json(record)})

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @auth_required
    def attendance_delete(attendance_id: int):
        service.delete_record(caller=current_caller(), attendance_id=attendance_id)
        return jsonify({"message": "Attendance record deleted successfully."})
