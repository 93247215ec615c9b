from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_role, current_user_id, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _read_upload() -> str:
        upload = request.files.get("file")
        raw = upload.read() if upload else request.get_data()
        if not raw:
            raise ValidationError("No CSV file uploaded")
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ValidationError("CSV file must be UTF-8 text")

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @login_required
    def students_list():
        students = container.student_service.list_students()
        return jsonify({"students": [s.to_dict() for s in students]})

    @app.route("/api/students/import", methods=["POST"], endpoint="students_import")
    @login_required
    def students_import():
        result = container.roster_importer.import_csv(_read_upload(), uploaded_by=current_user_id())
        return jsonify(
            {
                "success": True,
                "message": f"Successfully uploaded {result.inserted} students",
                "inserted": result.inserted,
                "preview": [s.to_dict() for s in result.preview],
            }
        ), 201

    @app.route("/api/students/template.csv", endpoint="students_template")
    @login_required
    def students_template():
        return app.response_class(
            container.roster_importer.template_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=student_template.csv"},
        )

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @admin_required
    def students_delete(student_id: int):
        container.student_service.delete_student(current_role=current_role(), student_id=student_id)
        return jsonify({"success": True})

    @app.route("/api/students", methods=["DELETE"], endpoint="students_delete_all")
    @admin_required
    def students_delete_all():
        deleted = container.student_service.delete_all(current_role=current_role())
        return jsonify({"success": True, "deleted": deleted})

    @app.route("/api/students/<int:student_id>/qr.png", endpoint="students_qr")
    @login_required
    def students_qr(student_id: int):
        student, png = container.student_service.qr_png(student_id)
        return app.response_class(
            png,
            mimetype="image/png",
            headers={"Content-Disposition": f"inline; filename=qr_{student.enrollment}.png"},
        )

    @app.route("/api/students/<int:student_id>/email-qr", methods=["POST"], endpoint="students_email_qr")
    @login_required
    def students_email_qr(student_id: int):
        to = container.student_service.email_qr(student_id)
        return jsonify({"success": True, "message": f"QR code sent to {to}"})
