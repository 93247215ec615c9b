from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    RosterValidationError,
    ScanRejected,
    TransportError,
    ValidationError,
)
from ..core.constants import IMPORT_MAX_REPORTED_ERRORS

# Checked in order; first match wins.
_STATUS_BY_ERROR = (
    (ValidationError, 400, "validation"),
    (NotFoundError, 404, "not_found"),
    (ConflictError, 409, "conflict"),
    (TransportError, 503, "transport"),
    (AuthenticationError, 401, "authentication"),
    (AuthorizationError, 403, "authorization"),
)


def error_response(e: DomainError):
    status, kind = 400, "error"
    for cls, code, name in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            status, kind = code, name
            break

    body = {"success": False, "error": kind, "message": str(e)}
    if isinstance(e, ScanRejected):
        body["reason"] = e.reason.value
    if isinstance(e, RosterValidationError):
        body["errors"] = e.errors[:IMPORT_MAX_REPORTED_ERRORS]
        body["error_count"] = len(e.errors)
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "authentication", "message": "Please log in"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "authentication", "message": "Please log in"}), 401

        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "error": "authorization", "message": "Admin access required"}), 403

        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def current_role() -> Role:
    return Role(session.get("role", Role.OPERATOR.value))
