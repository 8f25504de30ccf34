from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import require_enum
from ..common.web import current_caller, iso, json_body, login_required, optional_int
from ..container import Container
from ..core.enums import Role
from .model import User
from .service import AuthResult


def user_to_json(user: User) -> dict:
    return {
        "id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "employeeProfile": user.employee_id,
        "createdAt": iso(user.created_at),
    }


def _auth_to_json(result: AuthResult) -> dict:
    body = user_to_json(result.user)
    body["token"] = result.token
    body["expiresIn"] = result.expires_in
    return body


def register(app: Flask, container: Container) -> None:
    auth_required = login_required(container.auth_service.resolve_caller)

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        role = require_enum(Role, data["role"], "role") if data.get("role") else None
        result = container.auth_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
        )
        return jsonify(_auth_to_json(result)), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        result = container.auth_service.login(email=data.get("email", ""), password=data.get("password", ""))
        return jsonify(_auth_to_json(result))

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required
    def auth_me():
        return jsonify(user_to_json(container.user_service.me(caller=current_caller())))

    @app.route("/api/auth/users", methods=["GET"], endpoint="auth_users")
    @auth_required
    def auth_users():
        users = container.user_service.list_users(caller=current_caller())
        return jsonify([user_to_json(u) for u in users])

    @app.route("/api/auth/users/<int:user_id>", methods=["PUT"], endpoint="auth_update_user")
    @auth_required
    def auth_update_user(user_id: int):
        data = json_body()
        role = require_enum(Role, data["role"], "role") if data.get("role") else None
        unlink = "employeeProfile" in data and data["employeeProfile"] is None
        user = container.user_service.update_access(
            caller=current_caller(),
            user_id=user_id,
            role=role,
            employee_id=optional_int(data.get("employeeProfile"), "employeeProfile"),
            unlink=unlink,
        )
        return jsonify(user_to_json(user))
