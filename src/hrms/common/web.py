"""Flask glue shared by the feature controllers.

The bearer token is resolved once per request into a ``Caller`` kept on
``flask.g``; controllers pass it explicitly into every service call.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Any, Callable, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ProfileNotLinkedError,
    ValidationError,
)
from ..security.access import Caller

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (ValidationError, 400, "validation_error"),
    (AuthenticationError, 401, "unauthorized"),
    (AuthorizationError, 403, "forbidden"),
    (NotFoundError, 404, "not_found"),
    (ConflictError, 409, "conflict"),
    (ProfileNotLinkedError, 422, "profile_not_linked"),
]


def error_response(status: int, code: str, message: str):
    return jsonify({"error": code, "message": message}), status


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    parts = header.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def login_required(resolve_caller: Callable[[str], Caller]):
    """Decorator factory: require a valid bearer token and expose ``g.caller``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if not token:
                raise AuthenticationError("Not authorized, no token")
            g.caller = resolve_caller(token)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_caller() -> Caller:
    return g.caller


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        for exc_type, status, code in ERROR_STATUS:
            if isinstance(exc, exc_type):
                return error_response(status, code, str(exc))
        return error_response(400, "domain_error", str(exc))

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return error_response(exc.code or 500, (exc.name or "error").lower().replace(" ", "_"), exc.description)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response(500, "server_error", "Internal server error")
