from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol, Sequence

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "image"
    subtype: str = "png"


class Mailer(Protocol):
    def send(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class SMTPConfig:
    host: str
    port: int
    user: str
    password: str
    sender_name: str = "Lab Attendance"

    @classmethod
    def from_dict(cls, smtp_config: dict) -> "SMTPConfig":
        return cls(
            host=str(smtp_config.get("host", "smtp.gmail.com")),
            port=int(smtp_config.get("port", 465)),
            user=str(smtp_config.get("user", "")),
            password=str(smtp_config.get("password", "")),
            sender_name=str(smtp_config.get("sender_name", "Lab Attendance")),
        )


class SMTPMailer(Mailer):
    """Send HTML mail with attachments over implicit-TLS SMTP."""

    def __init__(self, config: SMTPConfig):
        self._config = config

    def build_message(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self._config.sender_name, self._config.user))
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML-capable mail client.")
        msg.add_alternative(html, subtype="html")
        for a in attachments:
            msg.add_attachment(a.content, maintype=a.maintype, subtype=a.subtype, filename=a.filename)
        return msg

    def send(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        if not self._config.user or not self._config.password:
            raise TransportError("SMTP credentials not configured")

        msg = self.build_message(to=to, subject=subject, html=html, attachments=attachments)
        try:
            with smtplib.SMTP_SSL(self._config.host, self._config.port, timeout=30) as server:
                server.login(self._config.user, self._config.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Sending mail to %s failed: %s", to, e, exc_info=True)
            raise TransportError("Failed to send email, please retry") from e

        logger.info("Email sent to %s (%s)", to, subject)
