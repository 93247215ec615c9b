from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Operator role used for authorization."""

    ADMIN = "admin"
    OPERATOR = "operator"


class ScanRejection(str, Enum):
    """Why a scan did not produce an attendance record."""

    INVALID_FORMAT = "invalid_format"
    STUDENT_NOT_FOUND = "student_not_found"
    NO_ACTIVE_SESSION = "no_active_session"
    ALREADY_MARKED = "already_marked"


class ScanState(str, Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    STUDENT_LOOKUP = "student_lookup"
    SESSION_LOOKUP = "session_lookup"
    DUPLICATE_CHECK = "duplicate_check"
    INSERTING = "inserting"
    SUCCESS = "success"
    REJECTED = "rejected"
