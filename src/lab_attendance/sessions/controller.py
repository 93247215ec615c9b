from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["GET"], endpoint="sessions_list")
    @login_required
    def sessions_list():
        return jsonify({"sessions": [s.to_dict() for s in container.session_service.list_sessions()]})

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    @login_required
    def sessions_create():
        data = request.get_json(silent=True) or request.form
        created = container.session_service.create_session(
            lab_no=data.get("lab_no"),
            section=data.get("section"),
            session_date=data.get("date"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            created_by=current_user_id(),
        )
        return jsonify({"success": True, "message": "Session created successfully", "session": created.to_dict()}), 201
