from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_caller, iso, json_body, login_required, optional_int
from ..container import Container
from .model import LeaveRequest


def leave_to_json(leave: LeaveRequest) -> dict:
    return {
        "id": leave.leave_id,
        "employee": leave.employee_id,
        "leaveType": leave.leave_type.value,
        "startDate": iso(leave.start_date),
        "endDate": iso(leave.end_date),
        "days": leave.days,
        "reason": leave.reason,
        "status": leave.status.value,
        "appliedDate": iso(leave.applied_at),
        "approvedBy": leave.approved_by,
        "approvalDate": iso(leave.approval_date),
    }


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service.resolve_caller)
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_apply")
    @auth_required
    def leaves_apply():
        data = json_body()
        leave = service.apply(
            caller=current_caller(),
            employee_id=optional_int(data.get("employee"), "employee"),
            leave_type=data.get("leaveType") or "casual",
            start_date=parse_optional_date(data.get("startDate")),
            end_date=parse_optional_date(data.get("endDate")),
            reason=data.get("reason", ""),
        )
        return jsonify(leave_to_json(leave)), 201

    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_list")
    @auth_required
    def leaves_list():
        leaves = service.list_leaves(caller=current_caller(), status=request.args.get("status") or None)
        return jsonify([leave_to_json(lv) for lv in leaves])

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="leaves_get")
    @auth_required
    def leaves_get(leave_id: int):
        return jsonify(leave_to_json(service.get_leave(caller=current_caller(), leave_id=leave_id)))

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PUT"], endpoint="leaves_set_status")
    @auth_required
    def leaves_set_status(leave_id: int):
        data = json_body()
        leave = service.set_status(caller=current_caller(), leave_id=leave_id, status=data.get("status") or "")
        return jsonify(leave_to_json(leave))

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="leaves_delete")
    @auth_required
    def leaves_delete(leave_id: int):
        service.delete_leave(caller=current_caller(), leave_id=leave_id)
        return jsonify({"message": "Leave request deleted successfully"})
