import os
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from .constants import AppConstants

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the mail transport rejects or fails a message"""

    pass


class EmailService:
    """
    Outbound email.

    Uses SMTP when SMTP_HOST is configured. Without it, messages are written to
    the log so local development works with no mail server.
    """

    def __init__(self):
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER")
        self.smtp_pass = os.getenv("SMTP_PASS")
        self.from_address = os.getenv("SMTP_FROM", AppConstants.DEFAULT_EMAIL_FROM)

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host)

    def send_email(
        self, to: str, subject: str, text: str, html: Optional[str] = None
    ) -> bool:
        """Send one email. Raises EmailDeliveryError on transport failure."""

        if not self.is_configured:
            logger.info(
                f"📧 EMAIL (no SMTP configured) To: {to} | Subject: {subject}\n{text}"
            )
            return True

        message = self._build_message(to, subject, text, html)

        try:
            if self.smtp_port == 465:
                server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=30)
            else:
                server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30)

            with server:
                if self.smtp_port != 465 and self.smtp_host != "localhost":
                    server.starttls()
                if self.smtp_user and self.smtp_pass:
                    server.login(self.smtp_user, self.smtp_pass)
                server.sendmail(self.from_address, [to], message.as_string())

        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send email to {to}: {e}") from e

        logger.info(f"📧 Email sent to {to}: {subject}")
        return True

    def _build_message(
        self, to: str, subject: str, text: str, html: Optional[str]
    ) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = to
        message.attach(MIMEText(text, "plain", "utf-8"))
        message.attach(MIMEText(html or text.replace("\n", "<br>"), "html", "utf-8"))
        return message
