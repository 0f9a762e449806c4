import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from remindermail.core.config import ReminderSettings
from remindermail.reminders.exceptions import DeliveryError


logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    def send(self, recipient: str, subject: str, html_body: str, sender: str) -> bool:
        ...


class EmailService:
    """SMTP mail transport. `send` returns False instead of raising."""

    def __init__(self, settings: ReminderSettings):
        # Validate required email configuration
        if not settings.SMTP_SERVER:
            raise ValueError("SMTP_SERVER is required but not configured")
        if not settings.SMTP_PORT:
            raise ValueError("SMTP_PORT is required but not configured")
        if not settings.FROM_EMAIL:
            raise ValueError("FROM_EMAIL is required but not configured")

        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = int(settings.SMTP_PORT)
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.timeout = settings.SMTP_TIMEOUT_SECONDS
        self.development = settings.is_development

    def send(self, recipient: str, subject: str, html_body: str, sender: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = recipient
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            self._send_email(msg, recipient)
        except DeliveryError as e:
            logger.warning(f"❌ Failed to send email: {e}")
            if self.development:
                # Local runs keep going as if delivered
                logger.info(f"📧 [DEV] Would send email to {recipient} | Subject: {subject}")
                return True
            return False
        logger.info(f"✅ Email sent successfully to {recipient}")
        return True

    def _send_email(self, msg: MIMEMultipart, to_email: str) -> None:
        """Send over SMTP, wrapping any failure in DeliveryError."""
        context = ssl.create_default_context()
        try:
            if self.smtp_port == 465:
                # Implicit TLS
                with smtplib.SMTP_SSL(self.smtp_server, self.smtp_port, context=context, timeout=self.timeout) as server:
                    self._login(server)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                    server.starttls(context=context)
                    self._login(server)
                    server.send_message(msg)
        except smtplib.SMTPException as e:
            raise DeliveryError(to_email, f"SMTP error: {e}") from e
        except OSError as e:
            raise DeliveryError(to_email, f"connection error: {e}") from e

    def _login(self, server: smtplib.SMTP) -> None:
        # Relays on localhost usually need no auth
        if self.smtp_username and self.smtp_password:
            server.login(self.smtp_username, self.smtp_password)
