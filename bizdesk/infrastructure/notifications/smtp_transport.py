"""
SMTP email transport.

``smtplib`` is blocking, so each send runs in a worker thread to keep the
event loop (and the sweep scheduler on it) responsive.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from bizdesk.config import get_logger
from bizdesk.config.settings import EmailSettings
from bizdesk.core.exceptions import ConfigurationError, NotifierError
from bizdesk.core.interfaces.notifier import IEmailTransport

logger = get_logger(__name__)


class SMTPEmailTransport(IEmailTransport):
    """Sends multipart (text + optional HTML) email over SMTP."""

    def __init__(self, settings: EmailSettings):
        self._settings = settings

    def build_message(
        self, to: str, subject: str, text: str, html: str | None = None
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = self._settings.from_address
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(text, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))
        return msg

    def _send_sync(self, msg: MIMEMultipart) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.timeout) as server:
            if s.use_tls:
                server.starttls()
            if s.smtp_user and s.smtp_password:
                server.login(s.smtp_user, s.smtp_password)
            server.send_message(msg)

    async def send(
        self, to: str, subject: str, text: str, html: str | None = None
    ) -> None:
        msg = self.build_message(to, subject, text, html)
        try:
            await asyncio.to_thread(self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotifierError(to, str(e)) from e
        logger.info("email_sent", to=to, subject=subject)


class DisabledEmailTransport(IEmailTransport):
    """Transport used when email is switched off; logs instead of sending."""

    async def send(
        self, to: str, subject: str, text: str, html: str | None = None
    ) -> None:
        logger.info("email_suppressed", to=to, subject=subject)


def create_email_transport(settings: EmailSettings) -> IEmailTransport:
    """Pick the transport for the configured email settings."""
    if settings.enabled:
        if settings.smtp_user and not settings.smtp_password:
            raise ConfigurationError("EMAIL_SMTP_PASSWORD is required when EMAIL_SMTP_USER is set")
        return SMTPEmailTransport(settings)
    return DisabledEmailTransport()
