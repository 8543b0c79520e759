"""Session-cookie role checks for the controller layer.

The upstream authenticator stores ``principal_id``, ``email`` and ``roles``
in the Flask session; identity bootstrap adds ``employee_id``.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role


def session_roles() -> set:
    claims = set(session.get("roles", []))
    return {role for role in Role if role.value in claims}


def current_employee_id() -> Optional[int]:
    value = session.get("employee_id")
    return int(value) if value is not None else None


def _deny(status: int, message: str):
    return jsonify({"ok": False, "error": "Unauthorized" if status == 401 else "Forbidden", "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "principal_id" not in session:
            return _deny(401, "Please sign in to continue.")
        return view(*args, **kwargs)

    return wrapper


def employee_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "principal_id" not in session:
            return _deny(401, "Please sign in to continue.")
        if Role.EMPLOYEE not in session_roles() or current_employee_id() is None:
            return _deny(403, "No employee record is linked to this account.")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "principal_id" not in session:
            return _deny(401, "Please sign in to continue.")
        if Role.ADMIN not in session_roles():
            return _deny(403, "Admin role required.")
        return view(*args, **kwargs)

    return wrapper
