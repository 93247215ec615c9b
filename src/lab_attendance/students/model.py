from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class NewStudent:
    """A validated roster row, ready for insertion."""

    roll: str
    name: str
    enrollment: str
    email: Optional[str] = None
    phone: Optional[str] = None
    sem: Optional[str] = None
    college: Optional[str] = None
    section: Optional[str] = None
    system_no: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on the roster, keyed by enrollment."""

    student_id: int
    enrollment: str
    name: str
    roll: str
    email: Optional[str] = None
    phone: Optional[str] = None
    sem: Optional[str] = None
    college: Optional[str] = None
    section: Optional[str] = None
    system_no: Optional[str] = None
    uploaded_by: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)
