from __future__ import annotations

import logging
from html import escape
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.mailer import Attachment, Mailer
from ..qr.generator import make_qr_png
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: roster administration (list, delete, QR codes)."""

    def __init__(self, students: StudentRepository, mailer: Optional[Mailer] = None):
        self._students = students
        self._mailer = mailer

    def list_students(self) -> list[Student]:
        return list(self._students.list_all())

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def delete_student(self, *, current_role: Role, student_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete students")

        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("Deleted student %s", student_id)

    def delete_all(self, *, current_role: Role) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete students")

        deleted = self._students.delete_all()
        logger.warning("Roster cleared: %d students deleted", deleted)
        return deleted

    def qr_png(self, student_id: int) -> tuple[Student, bytes]:
        student = self.get_student(student_id)
        return student, make_qr_png(student.enrollment)

    def email_qr(self, student_id: int) -> str:
        """Mail the student their QR code; returns the recipient address."""

        student, png = self.qr_png(student_id)
        if not student.email:
            raise ValidationError("Student has no email address")
        if self._mailer is None:
            raise ValidationError("Email is not configured")

        html = (
            f"<p>Hello {escape(student.name)},</p>"
            f"<p>Attached is your lab attendance QR code for enrollment <b>{escape(student.enrollment)}</b>. "
            "Show it at the lab scanner to mark your attendance.</p>"
        )
        self._mailer.send(
            to=student.email,
            subject="Your lab attendance QR code",
            html=html,
            attachments=[Attachment(filename=f"qr_{student.enrollment}.png", content=png)],
        )
        return student.email
