from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import LabSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[LabSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        lab_no: str,
        section: str,
        session_date: date,
        start_time: time,
        end_time: time,
        created_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_open_at(self, *, on_date: date, at_time: time) -> Sequence[LabSession]:
        """Sessions on `on_date` whose window contains `at_time` (bounds inclusive)."""

        raise NotImplementedError

    def list_all(self) -> Sequence[LabSession]:
        """Newest first (date desc, start desc)."""

        raise NotImplementedError
