from __future__ import annotations

import csv
import io
import logging
from typing import Optional

from ..core.constants import EXPORT_COLUMNS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import AttendanceReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceReportService:
    """Use case: view, export and reset attendance records."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_rows(self, *, session_id: Optional[int] = None) -> list[dict]:
        return [self._to_ui(r) for r in self._attendance.get_report_rows(session_id=session_id)]

    def export_csv(self, *, session_id: Optional[int] = None) -> bytes:
        """CSV with header Name,Roll,Enrollment,Section,Lab,Date,Time,SystemNo."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(EXPORT_COLUMNS), lineterminator="\n")
        writer.writeheader()
        for r in self._attendance.get_report_rows(session_id=session_id):
            writer.writerow(
                {
                    "Name": r.name,
                    "Roll": r.roll,
                    "Enrollment": r.enrollment,
                    "Section": r.section or "",
                    "Lab": r.lab_no,
                    "Date": r.session_date.strftime("%d/%m/%Y"),
                    "Time": r.scanned_at.strftime("%H:%M:%S"),
                    "SystemNo": r.system_no,
                }
            )
        return out.getvalue().encode("utf-8-sig")

    def reset(self, *, current_role: Role) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reset attendance")

        deleted = self._attendance.delete_all()
        logger.warning("Attendance reset: %d records deleted", deleted)
        return deleted

    def _to_ui(self, r: AttendanceReportRow) -> dict:
        return {
            "attendance_id": r.attendance_id,
            "name": r.name,
            "roll": r.roll,
            "enrollment": r.enrollment,
            "section": r.section or "N/A",
            "lab_no": r.lab_no,
            "date": r.session_date.strftime("%Y-%m-%d"),
            "window": f"{r.start_time.strftime('%H:%M')}-{r.end_time.strftime('%H:%M')}",
            "time": r.scanned_at.strftime("%H:%M:%S"),
            "system_no": r.system_no,
        }
