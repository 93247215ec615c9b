from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from html import escape
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import is_valid_email, require_max_length, require_min_length, require_non_empty
from ..core.constants import (
    MIN_PASSWORD_LENGTH,
    OPERATOR_EMAIL_MAX_LENGTH,
    OPERATOR_NAME_MAX_LENGTH,
    TEMP_PASSWORD_BYTES,
)
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from ..notifications.mailer import Mailer
from .model import Operator
from .repository import OperatorRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate an operator (login)."""

    def __init__(self, operators: OperatorRepository):
        self._operators = operators

    def authenticate(self, email: str, password: str) -> SessionUser:
        operator = self._operators.get_by_email((email or "").strip().lower())
        if not operator or not operator.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(operator.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=operator.user_id,
            full_name=operator.full_name,
            email=operator.email,
            role=operator.role,
        )


class UserService:
    """Use case: manage operator accounts (admin)."""

    def __init__(self, operators: OperatorRepository, mailer: Optional[Mailer] = None):
        self._operators = operators
        self._mailer = mailer

    def create_operator(
        self,
        *,
        current_role: Role,
        full_name: str,
        email: str,
        password: str,
        role: Role = Role.OPERATOR,
        send_credentials: bool = True,
    ) -> int:
        """Create an account and, when mail is configured, email its credentials.

        A failed credentials email is logged; the account is still created.
        """

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create operators")

        full_name = require_non_empty(full_name, "Full name required")
        email = require_non_empty(email, "Email required").lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email")
        require_max_length(full_name, "Full name", OPERATOR_NAME_MAX_LENGTH)
        require_max_length(email, "Email", OPERATOR_EMAIL_MAX_LENGTH)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._operators.get_by_email(email):
            raise ConflictError("An operator with this email already exists")

        user_id = self._operators.create(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Created %s account %s (%s)", role.value, user_id, email)

        if send_credentials and self._mailer is not None:
            try:
                self._send_credentials(
                    email=email,
                    full_name=full_name,
                    password=password,
                    role=role,
                    subject="Your lab attendance account",
                )
            except TransportError as e:
                logger.warning("Account %s created but credentials email failed: %s", email, e)
        return user_id

    def resend_credentials(self, *, current_role: Role, user_id: int) -> str:
        """Issue a new temporary password and email it; returns the recipient."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can resend credentials")
        if self._mailer is None:
            raise ValidationError("Email is not configured")

        operator = self._get(user_id)
        password = secrets.token_urlsafe(TEMP_PASSWORD_BYTES)
        self._operators.update_password_hash(operator.user_id, generate_password_hash(password))
        logger.info("Password reset for %s", operator.email)

        self._send_credentials(
            email=operator.email,
            full_name=operator.full_name,
            password=password,
            role=operator.role,
            subject="Your lab attendance account credentials",
        )
        return operator.email

    def update_role(self, *, current_role: Role, user_id: int, role: Role, acting_user_id: Optional[int] = None) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change roles")

        operator = self._get(user_id)
        if acting_user_id is not None and operator.user_id == int(acting_user_id) and role != Role.ADMIN:
            raise ValidationError("You cannot remove your own admin role")
        if operator.role == role:
            return

        self._operators.update_role(operator.user_id, role)
        logger.info("Role of %s changed from %s to %s", operator.email, operator.role.value, role.value)

    def list_operators(self) -> list[dict]:
        return [
            {"user_id": o.user_id, "full_name": o.full_name, "email": o.email, "role": o.role.value, "is_active": o.is_active}
            for o in self._operators.list_all()
        ]

    def delete_operator(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete operators")

        operator = self._get(user_id)
        if operator.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")

        if not self._operators.delete_by_id(int(user_id)):
            raise NotFoundError("Operator not found")

    def _get(self, user_id: int) -> Operator:
        operator = self._operators.get_by_id(int(user_id))
        if not operator:
            raise NotFoundError("Operator not found")
        return operator

    def _send_credentials(self, *, email: str, full_name: str, password: str, role: Role, subject: str) -> None:
        html = (
            f"<p>Hello {escape(full_name)},</p>"
            "<p>Your lab attendance account is ready.</p>"
            f"<p><b>Email:</b> {escape(email)}<br>"
            f"<b>Password:</b> <code>{escape(password)}</code><br>"
            f"<b>Role:</b> {escape(role.value)}</p>"
            "<p>Please change your password after your first login.</p>"
        )
        self._mailer.send(to=email, subject=subject, html=html)
