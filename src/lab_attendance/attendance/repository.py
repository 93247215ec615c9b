from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        session_id: int,
        scanned_at: datetime,
        system_no: str,
        scanned_by: Optional[int],
    ) -> int:
        """Insert one record.

        Raises ConflictError when (student_id, session_id) already has a record.
        """

        raise NotImplementedError

    def get_report_rows(self, *, session_id: Optional[int] = None) -> Sequence[AttendanceReportRow]:
        """Records joined with student/session, newest scan first."""

        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
