from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewStudent, Student
from .repository import StudentRepository

_COLUMNS = "student_id, enrollment, name, roll, email, phone, sem, college, section, system_no, uploaded_by"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        enrollment=r["enrollment"],
        name=r["name"],
        roll=r["roll"],
        email=r.get("email"),
        phone=r.get("phone"),
        sem=r.get("sem"),
        college=r.get("college"),
        section=r.get("section"),
        system_no=r.get("system_no"),
        uploaded_by=r.get("uploaded_by"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_by_enrollment(self, enrollment: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE enrollment=%s", (enrollment,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def insert_batch(self, students: Sequence[NewStudent], *, uploaded_by: Optional[int]) -> int:
        if not students:
            return 0

        # One transaction: db_cursor rolls back every row if any enrollment collides.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO students(roll, name, enrollment, email, phone, sem, college, section, system_no, uploaded_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (s.roll, s.name, s.enrollment, s.email, s.phone, s.sem, s.college, s.section, s.system_no, uploaded_by)
                    for s in students
                ],
            )
            return len(students)

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name ASC, student_id ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students")
            return int(cur.rowcount)
