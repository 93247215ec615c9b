from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_session(self, *, student_id: int, session_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, session_id, scanned_at, system_no, scanned_by
                FROM attendance
                WHERE student_id=%s AND session_id=%s
                """,
                (int(student_id), int(session_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                student_id=int(r["student_id"]),
                session_id=int(r["session_id"]),
                scanned_at=r["scanned_at"],
                system_no=r["system_no"],
                scanned_by=r.get("scanned_by"),
            )

    def create(
        self,
        *,
        student_id: int,
        session_id: int,
        scanned_at: datetime,
        system_no: str,
        scanned_by: Optional[int],
    ) -> int:
        # uq_attendance_student_session turns a lost race into ConflictError (see db_cursor).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, session_id, scanned_at, system_no, scanned_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(session_id), scanned_at, system_no, scanned_by),
            )
            return int(cur.lastrowid)

    def get_report_rows(self, *, session_id: Optional[int] = None) -> Sequence[AttendanceReportRow]:
        where = ""
        params: tuple = ()
        if session_id is not None:
            where = "WHERE a.session_id=%s"
            params = (int(session_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.scanned_at, a.system_no,
                    st.name, st.roll, st.enrollment, st.section,
                    ls.lab_no, ls.session_date, ls.start_time, ls.end_time
                FROM attendance a
                JOIN students st ON st.student_id = a.student_id
                JOIN lab_sessions ls ON ls.session_id = a.session_id
                {where}
                ORDER BY a.scanned_at DESC, a.attendance_id DESC
                """,
                params,
            )
            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    name=r["name"],
                    roll=r["roll"],
                    enrollment=r["enrollment"],
                    section=r.get("section"),
                    lab_no=r["lab_no"],
                    session_date=r["session_date"],
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    scanned_at=r["scanned_at"],
                    system_no=r["system_no"],
                )
                for r in fetchall(cur)
            ]

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance")
            return int(cur.rowcount)
