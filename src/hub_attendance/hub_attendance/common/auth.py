"""Session guards for JSON routes.

The person identity is placed in the Flask session by the external login
collaborator; these guards only read it.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role


def current_person_id() -> Optional[int]:
    raw = session.get("user_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_person_id() is None:
            return jsonify({"error": "Unauthorized", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_person_id() is None:
            return jsonify({"error": "Unauthorized", "message": "Please sign in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"error": "Forbidden", "message": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper
