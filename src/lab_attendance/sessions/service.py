from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import parse_iso_date, parse_time_of_day
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import SESSION_LAB_NO_MAX_LENGTH, SESSION_SECTION_MAX_LENGTH
from ..core.exceptions import ValidationError
from .model import LabSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: create and list lab sessions (admin form)."""

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    def create_session(
        self,
        *,
        lab_no: Optional[str],
        section: Optional[str],
        session_date: Optional[str],
        start_time: Optional[str],
        end_time: Optional[str],
        created_by: Optional[int] = None,
    ) -> LabSession:
        lab_no = require_non_empty(lab_no, "Lab number required")
        section = require_non_empty(section, "Section required")
        date_s = require_non_empty(session_date, "Date required")
        start_s = require_non_empty(start_time, "Start time required")
        end_s = require_non_empty(end_time, "End time required")
        require_max_length(lab_no, "Lab number", SESSION_LAB_NO_MAX_LENGTH)
        require_max_length(section, "Section", SESSION_SECTION_MAX_LENGTH)

        try:
            day = parse_iso_date(date_s)
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")
        try:
            start = parse_time_of_day(start_s)
            end = parse_time_of_day(end_s)
        except ValueError:
            raise ValidationError("Times must be HH:MM")

        if start >= end:
            raise ValidationError("End time must be after start time")

        session_id = self._sessions.create(
            lab_no=lab_no,
            section=section,
            session_date=day,
            start_time=start,
            end_time=end,
            created_by=created_by,
        )
        logger.info("Created session %s (%s/%s %s %s-%s)", session_id, lab_no, section, day, start, end)
        return LabSession(
            session_id=session_id,
            lab_no=lab_no,
            section=section,
            session_date=day,
            start_time=start,
            end_time=end,
            created_by=created_by,
        )

    def list_sessions(self):
        return list(self._sessions.list_all())
