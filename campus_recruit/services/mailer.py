"""
SMTP mail transport.

One SmtpMailer per process, created on first use by `get_mailer()` and
reused afterwards. It holds configuration only; every send opens its own
SMTP connection, so sharing it across requests is safe.

With no SMTP host configured the mailer logs the message instead of sending
it (local development).
"""

import logging
import smtplib
from email.message import EmailMessage

from campus_recruit.core.config import Settings, get_settings
from campus_recruit.services.email_templates import RenderedEmail

logger = logging.getLogger(__name__)


class SmtpMailer:
    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.sender = settings.email_from_address
        self.timeout = settings.email_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def build_message(self, to: str, email: RenderedEmail) -> EmailMessage:
        """Plain text first, HTML as the preferred alternative."""
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = email.subject
        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")
        return message

    def send(self, to: str, email: RenderedEmail) -> None:
        """Blocking send. Raises on any SMTP/network error."""
        message = self.build_message(to, email)

        if not self.enabled:
            logger.info("SMTP not configured, not sending '%s' to %s", email.subject, to)
            return

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(message)


# Global mailer (lazily created, never torn down)
_mailer = None


def get_mailer():
    """Get or create the process-wide mailer (singleton pattern)"""
    global _mailer
    if _mailer is None:
        _mailer = SmtpMailer(get_settings())
    return _mailer


def set_mailer(mailer) -> None:
    """Swap the process-wide mailer (tests, alternative transports). None resets it."""
    global _mailer
    _mailer = mailer
