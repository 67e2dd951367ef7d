from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import login_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/roster", methods=["GET"], endpoint="api_roster")
    @login_required
    def api_roster():
        """Read-only roster used by observers to derive presence."""
        role_s = (request.args.get("role") or "").strip().lower()
        try:
            role = Role(role_s) if role_s else None
        except ValueError:
            return jsonify({"success": False, "error": "ValidationError", "message": f"Unknown role {role_s!r}"}), 400

        people = container.people_repo.list_roster(role=role)
        return jsonify(
            [
                {
                    "id": p.person_id,
                    "name": p.full_name,
                    "email": (p.email or "").lower(),
                    "role": p.role.value,
                }
                for p in people
            ]
        )
