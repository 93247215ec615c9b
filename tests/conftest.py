from __future__ import annotations

import dataclasses
import threading
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from lab_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from lab_attendance.container import assemble
from lab_attendance.core.enums import Role
from lab_attendance.core.exceptions import ConflictError
from lab_attendance.main import create_app
from lab_attendance.sessions.model import LabSession
from lab_attendance.students.model import Student
from lab_attendance.users.model import Operator


class InMemoryOperators:
    def __init__(self):
        self._by_id: dict[int, Operator] = {}
        self._next_id = 1

    def get_by_id(self, user_id):
        return self._by_id.get(int(user_id))

    def get_by_email(self, email):
        return next((o for o in self._by_id.values() if o.email == email), None)

    def create(self, *, full_name, email, password_hash, role):
        if self.get_by_email(email):
            raise ConflictError(f"Duplicate entry '{email}'")
        uid = self._next_id
        self._next_id += 1
        self._by_id[uid] = Operator(uid, full_name, email, password_hash, role)
        return uid

    def update_role(self, user_id, role):
        return self._replace(user_id, role=role)

    def update_password_hash(self, user_id, password_hash):
        return self._replace(user_id, password_hash=password_hash)

    def _replace(self, user_id, **changes):
        op = self._by_id.get(int(user_id))
        if op is None:
            return False
        self._by_id[op.user_id] = dataclasses.replace(op, **changes)
        return True

    def delete_by_id(self, user_id):
        return self._by_id.pop(int(user_id), None) is not None

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda o: o.full_name)


class InMemoryStudents:
    def __init__(self):
        self._by_id: dict[int, Student] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_by_id(self, student_id):
        return self._by_id.get(int(student_id))

    def get_by_enrollment(self, enrollment):
        return next((s for s in self._by_id.values() if s.enrollment == enrollment), None)

    def insert_batch(self, students, *, uploaded_by):
        with self._lock:
            taken = {s.enrollment for s in self._by_id.values()}
            for s in students:
                if s.enrollment in taken:
                    raise ConflictError(f"Duplicate entry '{s.enrollment}' for key 'enrollment'")
                taken.add(s.enrollment)

            for s in students:
                sid = self._next_id
                self._next_id += 1
                self._by_id[sid] = Student(student_id=sid, uploaded_by=uploaded_by, **s.to_dict())
            return len(students)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda s: s.name)

    def delete_by_id(self, student_id):
        return self._by_id.pop(int(student_id), None) is not None

    def delete_all(self):
        n = len(self._by_id)
        self._by_id.clear()
        return n


class InMemorySessions:
    def __init__(self):
        self._by_id: dict[int, LabSession] = {}
        self._next_id = 1

    def add(self, lab_no: str, section: str, session_date: date, start: time, end: time) -> LabSession:
        sid = self.create(lab_no=lab_no, section=section, session_date=session_date, start_time=start, end_time=end)
        return self._by_id[sid]

    def get_by_id(self, session_id):
        return self._by_id.get(int(session_id))

    def create(self, *, lab_no, section, session_date, start_time, end_time, created_by=None):
        sid = self._next_id
        self._next_id += 1
        self._by_id[sid] = LabSession(sid, lab_no, section, session_date, start_time, end_time, created_by)
        return sid

    def list_open_at(self, *, on_date, at_time):
        found = [s for s in self._by_id.values() if s.is_open_at(on_date, at_time)]
        return sorted(found, key=lambda s: (s.start_time, s.session_id))

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda s: (s.session_date, s.start_time), reverse=True)


class InMemoryAttendance:
    """Enforces one record per (student, session) like the UNIQUE key does."""

    def __init__(self, students: InMemoryStudents, sessions: InMemorySessions):
        self._students = students
        self._sessions = sessions
        self._by_key: dict[tuple[int, int], AttendanceRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_for_student_and_session(self, *, student_id, session_id) -> Optional[AttendanceRecord]:
        return self._by_key.get((student_id, session_id))

    def create(self, *, student_id, session_id, scanned_at, system_no, scanned_by):
        with self._lock:
            key = (student_id, session_id)
            if key in self._by_key:
                raise ConflictError("Duplicate entry for key 'uq_attendance_student_session'")
            aid = self._next_id
            self._next_id += 1
            self._by_key[key] = AttendanceRecord(aid, student_id, session_id, scanned_at, system_no, scanned_by)
            return aid

    def records(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())

    def get_report_rows(self, *, session_id=None):
        rows = []
        for r in self._by_key.values():
            if session_id is not None and r.session_id != session_id:
                continue
            st = self._students.get_by_id(r.student_id)
            se = self._sessions.get_by_id(r.session_id)
            rows.append(
                AttendanceReportRow(
                    attendance_id=r.attendance_id,
                    name=st.name,
                    roll=st.roll,
                    enrollment=st.enrollment,
                    section=st.section,
                    lab_no=se.lab_no,
                    session_date=se.session_date,
                    start_time=se.start_time,
                    end_time=se.end_time,
                    scanned_at=r.scanned_at,
                    system_no=r.system_no,
                )
            )
        rows.sort(key=lambda row: row.scanned_at, reverse=True)
        return rows

    def delete_all(self):
        n = len(self._by_key)
        self._by_key.clear()
        return n


class FakeMailer:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, *, to, subject, html, attachments=()):
        self.sent.append({"to": to, "subject": subject, "html": html, "attachments": list(attachments)})


_ROSTER_CSV = (
    "roll,name,enrollment,email,phone,sem,college,section,system_no\n"
    "1,Asha Rao,EN001,asha@college.edu,9000000001,5,ABC College,A,PC-01\n"
    "2,Bilal Khan,EN002,,,5,ABC College,A,\n"
)


def hash_pw(password: str) -> str:
    return generate_password_hash(password, method="pbkdf2:sha256")


@pytest.fixture
def operators():
    repo = InMemoryOperators()
    repo.create(full_name="Admin", email="admin@lab.local", password_hash=hash_pw("admin123"), role=Role.ADMIN)
    repo.create(full_name="Olga Operator", email="op@lab.local", password_hash=hash_pw("op12345"), role=Role.OPERATOR)
    return repo


@pytest.fixture
def students():
    return InMemoryStudents()


@pytest.fixture
def sessions():
    return InMemorySessions()


@pytest.fixture
def attendance(students, sessions):
    return InMemoryAttendance(students, sessions)


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def container(operators, students, sessions, attendance, mailer):
    return assemble(
        operators_repo=operators,
        students_repo=students,
        sessions_repo=sessions,
        attendance_repo=attendance,
        mailer=mailer,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def roster_csv() -> str:
    return _ROSTER_CSV


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 30, 0)
