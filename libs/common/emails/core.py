"""
Core email sending over SMTP (STARTTLS).
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


class EmailNotConfigured(RuntimeError):
    """SMTP credentials are missing, so nothing can be sent."""


def _build_message(
    sender: str,
    to_email: str,
    subject: str,
    body: str,
    html_body: Optional[str],
):
    if html_body:
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(html_body, "html"))
    else:
        msg = MIMEText(body, "plain")

    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to_email
    return msg


async def send_email(
    to_email: str,
    subject: str,
    body: str,
    html_body: Optional[str] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> str:
    """
    Send an email through the configured SMTP server.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        body: Plain text body
        html_body: Optional HTML alternative
        from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)
        from_name: Sender name (defaults to DEFAULT_FROM_NAME)

    Returns:
        The Message-ID header of the sent email.

    Raises:
        EmailNotConfigured: SMTP_USERNAME / SMTP_PASSWORD are not set.
        smtplib.SMTPException, OSError: delivery failed.
    """
    settings = get_settings()

    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.warning("SMTP credentials not configured - email to %s not sent", to_email)
        raise EmailNotConfigured("SMTP credentials are not configured")

    sender_email = from_email or settings.DEFAULT_FROM_EMAIL
    sender_name = from_name or settings.DEFAULT_FROM_NAME
    msg = _build_message(
        f"{sender_name} <{sender_email}>", to_email, subject, body, html_body
    )
    message_id = make_msgid(domain=sender_email.split("@")[-1])
    msg["Message-ID"] = message_id

    logger.info("Sending email to %s: %s", to_email, subject)
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
        server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.sendmail(sender_email, to_email, msg.as_string())

    logger.info("Email sent to %s (%s)", to_email, message_id)
    return message_id
