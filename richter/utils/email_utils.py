# richter/utils/email_utils.py
import logging
import smtplib
from email.message import EmailMessage

from richter.core.config import Settings
from richter.core.exceptions import UpstreamFailure
from richter.utils.upstream import run_blocking

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Notification gateway backed by an SMTP-over-SSL relay."""

    component = "email"

    def __init__(self, settings: Settings):
        self.settings = settings

    def _send(self, to_email: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.SMTP_USER
        msg["To"] = to_email
        msg.set_content(body)

        with smtplib.SMTP_SSL(
            self.settings.SMTP_SERVER,
            self.settings.SMTP_PORT,
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
        ) as smtp:
            smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
            smtp.send_message(msg)

    async def send(self, to_email: str, subject: str, body: str) -> None:
        try:
            await run_blocking(
                self.component,
                self.settings.UPSTREAM_TIMEOUT_SECONDS,
                self._send,
                to_email,
                subject,
                body,
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP send to %s failed: %s", to_email, e)
            raise UpstreamFailure(self.component) from e
        logger.info("Mail '%s' sent to %s", subject, to_email)


def verification_email(name: str, link: str):
    subject = "Verify your email - Richter Restaurant"
    body = f"""
Hello {name or 'there'},

Thank you for registering at Richter Restaurant! Please verify your email by clicking the link below:

{link}

If you did not register, simply ignore this message.

-- Team Richter
"""
    return subject, body


def payment_receipt_email(payment: dict):
    subject = "Payment received - Richter Restaurant"
    body = f"""
Hello,

We received your payment of ${payment.get('price', 0)}.
Transaction: {payment.get('transactionId', '-')}

Thank you for ordering with us!

-- Team Richter
"""
    return subject, body
