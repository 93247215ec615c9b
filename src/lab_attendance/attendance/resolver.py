from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, truncate_to_minute
from ..core.constants import UNASSIGNED_SYSTEM_NO
from ..core.enums import ScanState
from ..core.exceptions import (
    AlreadyMarkedError,
    ConflictError,
    InvalidPayloadError,
    NoActiveSessionError,
    StudentNotFoundError,
)
from ..sessions.model import LabSession
from ..sessions.repository import SessionRepository
from ..students.repository import StudentRepository
from .model import ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

StateListener = Callable[[ScanState], None]


def pick_session(candidates: Sequence[LabSession]) -> LabSession:
    """Tie-break for overlapping windows: earliest start, then lowest id."""
    return min(candidates, key=lambda s: (s.start_time, s.session_id))


class AttendanceResolver:
    """Turn one scanned QR payload into at most one attendance record.

    Steps short-circuit on the first failure:
    normalize -> student lookup -> active session -> duplicate check -> insert.
    Every rejection is raised as a ScanRejected subclass carrying its reason.
    """

    def __init__(
        self,
        students: StudentRepository,
        sessions: SessionRepository,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._students = students
        self._sessions = sessions
        self._attendance = attendance
        self._clock = clock

    def resolve(
        self,
        payload: Optional[str],
        *,
        operator_id: Optional[int],
        now: Optional[datetime] = None,
        on_state: Optional[StateListener] = None,
    ) -> ScanResult:
        notify = on_state or (lambda _state: None)
        now = now or self._clock()

        notify(ScanState.NORMALIZING)
        enrollment = (payload or "").strip()
        if not enrollment:
            raise InvalidPayloadError("Invalid QR code format")

        notify(ScanState.STUDENT_LOOKUP)
        student = self._students.get_by_enrollment(enrollment)
        if not student:
            raise StudentNotFoundError(f"Student not found: {enrollment}")

        notify(ScanState.SESSION_LOOKUP)
        # Windows are compared at minute granularity, bounds inclusive.
        at = truncate_to_minute(now)
        candidates = self._sessions.list_open_at(on_date=at.date(), at_time=at.time())
        if not candidates:
            raise NoActiveSessionError("No active session found")
        session = pick_session(candidates)
        if len(candidates) > 1:
            logger.info(
                "Overlapping sessions %s at %s, using session %s",
                [s.session_id for s in candidates], at, session.session_id,
            )

        notify(ScanState.DUPLICATE_CHECK)
        existing = self._attendance.get_for_student_and_session(
            student_id=student.student_id, session_id=session.session_id
        )
        if existing:
            raise AlreadyMarkedError("Attendance already marked for this session")

        notify(ScanState.INSERTING)
        system_no = student.system_no or UNASSIGNED_SYSTEM_NO
        try:
            attendance_id = self._attendance.create(
                student_id=student.student_id,
                session_id=session.session_id,
                scanned_at=now,
                system_no=system_no,
                scanned_by=operator_id,
            )
        except ConflictError as e:
            # Another scanner inserted between the check and the insert.
            raise AlreadyMarkedError("Attendance already marked for this session") from e

        logger.info(
            "Attendance marked: %s in session %s (lab %s) by operator %s",
            enrollment, session.session_id, session.lab_no, operator_id,
        )
        return ScanResult(
            attendance_id=attendance_id,
            session_id=session.session_id,
            name=student.name,
            enrollment=student.enrollment,
            roll=student.roll,
            section=student.section,
            lab_no=session.lab_no,
            system_no=system_no,
            scanned_at=now,
        )
