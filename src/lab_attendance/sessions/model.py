from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class LabSession:
    """Domain entity: a timed lab session (window on one calendar date)."""

    session_id: int
    lab_no: str
    section: str
    session_date: date
    start_time: time
    end_time: time
    created_by: Optional[int] = None

    def is_open_at(self, on_date: date, at_time: time) -> bool:
        return self.session_date == on_date and self.start_time <= at_time <= self.end_time

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "lab_no": self.lab_no,
            "section": self.section,
            "date": self.session_date.strftime("%Y-%m-%d"),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
        }
