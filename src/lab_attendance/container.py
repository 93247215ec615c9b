from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.resolver import AttendanceResolver
from .attendance.service import AttendanceReportService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mailer import Mailer, SMTPConfig, SMTPMailer
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .students.importer import RosterImporter
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_operator_repository import MySQLOperatorRepository
from .users.repository import OperatorRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    operators_repo: OperatorRepository
    students_repo: StudentRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    roster_importer: RosterImporter
    student_service: StudentService
    session_service: SessionService
    resolver: AttendanceResolver
    report_service: AttendanceReportService


def assemble(
    *,
    operators_repo: OperatorRepository,
    students_repo: StudentRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    mailer: Optional[Mailer] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""

    return Container(
        conn=conn,
        operators_repo=operators_repo,
        students_repo=students_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(operators_repo),
        user_service=UserService(operators_repo, mailer),
        roster_importer=RosterImporter(students_repo),
        student_service=StudentService(students_repo, mailer),
        session_service=SessionService(sessions_repo),
        resolver=AttendanceResolver(students_repo, sessions_repo, attendance_repo),
        report_service=AttendanceReportService(attendance_repo),
    )


def build_container(*, db_config: dict, smtp_config: Optional[dict] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    mailer = SMTPMailer(SMTPConfig.from_dict(smtp_config)) if smtp_config else None

    return assemble(
        operators_repo=MySQLOperatorRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        mailer=mailer,
        conn=conn,
    )
