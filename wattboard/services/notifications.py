"""Outbound notification senders."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from wattboard.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    """Delivers a plain-text message to an email address."""

    def send(self, to: str, subject: str, body: str) -> None: ...


class SmtpNotificationSender:
    """Sends mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        sender: str = "no-reply@localhost",
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.timeout = timeout

    def send(self, to: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Failed to send %r to %s via %s", subject, to, self.host)
            raise NotificationError(f"Failed to send notification to {to}") from exc
        logger.info("Sent %r to %s", subject, to)


class LogNotificationSender:
    """Development sender: records that a message would have been sent."""

    def send(self, to: str, subject: str, body: str) -> None:
        # Body is not logged, it carries the reset link
        logger.warning("SMTP_HOST not configured; not sending %r to %s", subject, to)
