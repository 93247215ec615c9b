from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role, current_user_id, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _role_from(data) -> Role:
        try:
            return Role(data.get("role") or Role.OPERATOR.value)
        except ValueError:
            raise ValidationError("Unknown role")

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        app.logger.info("Operator %s logged in", s_user.email)

        return jsonify({"success": True, "user": {"user_id": s_user.user_id, "full_name": s_user.full_name, "role": s_user.role.value}})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", endpoint="me")
    @login_required
    def me():
        return jsonify({"user_id": session["user_id"], "full_name": session.get("name"), "role": session.get("role")})

    @app.route("/api/operators", methods=["GET"], endpoint="operators_list")
    @admin_required
    def operators_list():
        return jsonify({"operators": container.user_service.list_operators()})

    @app.route("/api/operators", methods=["POST"], endpoint="operators_create")
    @admin_required
    def operators_create():
        data = request.get_json(silent=True) or {}
        user_id = container.user_service.create_operator(
            current_role=current_role(),
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=_role_from(data),
        )
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/operators/<int:user_id>/role", methods=["PUT"], endpoint="operators_update_role")
    @admin_required
    def operators_update_role(user_id: int):
        data = request.get_json(silent=True) or {}
        if not data.get("role"):
            raise ValidationError("Role required")

        container.user_service.update_role(
            current_role=current_role(),
            user_id=user_id,
            role=_role_from(data),
            acting_user_id=current_user_id(),
        )
        return jsonify({"success": True, "message": "User role updated successfully"})

    @app.route("/api/operators/<int:user_id>/resend-credentials", methods=["POST"], endpoint="operators_resend_credentials")
    @admin_required
    def operators_resend_credentials(user_id: int):
        to = container.user_service.resend_credentials(current_role=current_role(), user_id=user_id)
        return jsonify({"success": True, "message": f"Credentials sent to {to}"})

    @app.route("/api/operators/<int:user_id>", methods=["DELETE"], endpoint="operators_delete")
    @admin_required
    def operators_delete(user_id: int):
        container.user_service.delete_operator(current_role=current_role(), user_id=user_id)
        return jsonify({"success": True})
