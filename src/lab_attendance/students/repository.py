from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewStudent, Student


class StudentRepository(Protocol):
    """Roster store.

    The service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_enrollment(self, enrollment: str) -> Optional[Student]:
        raise NotImplementedError

    def insert_batch(self, students: Sequence[NewStudent], *, uploaded_by: Optional[int]) -> int:
        """Insert all rows atomically.

        Raises ConflictError (and inserts nothing) if any enrollment already exists.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError

    def delete_all(self) -> int:
        raise NotImplementedError
