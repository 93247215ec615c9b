from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student present at one session."""

    attendance_id: int
    student_id: int
    session_id: int
    scanned_at: datetime
    system_no: str
    scanned_by: Optional[int] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for listing/exporting (record joined with student and session)."""

    attendance_id: int
    name: str
    roll: str
    enrollment: str
    section: Optional[str]
    lab_no: str
    session_date: date
    start_time: time
    end_time: time
    scanned_at: datetime
    system_no: str


@dataclass(frozen=True)
class ScanResult:
    """What the operator sees after a successful scan."""

    attendance_id: int
    session_id: int
    name: str
    enrollment: str
    roll: str
    section: Optional[str]
    lab_no: str
    system_no: str
    scanned_at: datetime

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "session_id": self.session_id,
            "name": self.name,
            "enrollment": self.enrollment,
            "roll": self.roll,
            "section": self.section or "N/A",
            "lab_no": self.lab_no,
            "system_no": self.system_no,
            "scanned_at": self.scanned_at.strftime("%Y-%m-%d %H:%M:%S"),
        }
