from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank cells and form fields are stored as NULL."""
    if value is None:
        return None
    value = value.strip()
    return value or None
