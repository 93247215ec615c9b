from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, current_role, current_user_id, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from ..qr.decoder import decode_image_file


def register(app: Flask, container: Container) -> None:
    def _scan(code: str):
        result = container.resolver.resolve(code, operator_id=current_user_id())
        return jsonify(
            {
                "success": True,
                "message": f"Attendance marked for {result.name}",
                "student": result.to_dict(),
            }
        ), 201

    def _session_filter():
        session_id = request.args.get("session_id", "")
        return int(session_id) if session_id.isdigit() else None

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @login_required
    def api_scan():
        data = request.get_json(silent=True) or {}
        return _scan(str(data.get("code") or ""))

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @login_required
    def api_scan_image():
        """Decode a QR code from an uploaded photo, then mark attendance."""

        upload = request.files.get("image")
        if upload is None:
            raise ValidationError("Missing image file")

        try:
            payloads = decode_image_file(upload.stream)
        except OSError:
            raise ValidationError("Unreadable image file")
        if not payloads:
            raise ValidationError("No QR code detected in image")

        return _scan(payloads[0])

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        return jsonify({"attendance": container.report_service.list_rows(session_id=_session_filter())})

    @app.route("/api/attendance.csv", methods=["GET"], endpoint="attendance_csv")
    @login_required
    def attendance_csv():
        filename = f"attendance_{now_local().strftime('%Y-%m-%d')}.csv"
        return app.response_class(
            container.report_service.export_csv(session_id=_session_filter()),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance", methods=["DELETE"], endpoint="attendance_reset")
    @admin_required
    def attendance_reset():
        deleted = container.report_service.reset(current_role=current_role())
        return jsonify({"success": True, "deleted": deleted})
