from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import LabSession
from .repository import SessionRepository

_COLUMNS = "session_id, lab_no, section, session_date, start_time, end_time, created_by"


def _to_session(r: dict) -> LabSession:
    return LabSession(
        session_id=int(r["session_id"]),
        lab_no=r["lab_no"],
        section=r["section"],
        session_date=r["session_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        created_by=r.get("created_by"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int) -> Optional[LabSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lab_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lab_sessions(lab_no, section, session_date, start_time, end_time, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (lab_no, section, session_date, start_time, end_time, created_by),
            )
            return int(cur.lastrowid)

    def list_open_at(self, *, on_date: date, at_time: time) -> Sequence[LabSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lab_sessions
                WHERE session_date=%s AND start_time <= %s AND end_time >= %s
                ORDER BY start_time ASC, session_id ASC
                """,
                (on_date, at_time, at_time),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[LabSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lab_sessions ORDER BY session_date DESC, start_time DESC")
            return [_to_session(r) for r in fetchall(cur)]
