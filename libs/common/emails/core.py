"""
SMTP delivery for transactional email.

Without SMTP credentials (local runs, tests) messages are logged instead of
sent. smtplib blocks, so delivery runs in a worker thread.
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)

SMTP_TIMEOUT_SECONDS = 30


def email_configured() -> bool:
    settings = get_settings()
    return bool(settings.SMTP_USERNAME and settings.SMTP_PASSWORD)


def build_message(
    to_email: str, subject: str, body: str, html_body: Optional[str] = None
):
    settings = get_settings()
    if html_body:
        message = MIMEMultipart("alternative")
        message.attach(MIMEText(body, "plain"))
        message.attach(MIMEText(html_body, "html"))
    else:
        message = MIMEText(body, "plain")

    message["Subject"] = subject
    message["From"] = formataddr(
        (settings.DEFAULT_FROM_NAME, settings.DEFAULT_FROM_EMAIL)
    )
    message["To"] = to_email
    return message


def _deliver(to_email: str, message) -> None:
    settings = get_settings()
    with smtplib.SMTP(
        settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS
    ) as server:
        server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.sendmail(settings.DEFAULT_FROM_EMAIL, to_email, message.as_string())


async def send_email(
    to_email: str, subject: str, body: str, html_body: Optional[str] = None
) -> bool:
    """
    Send a plain text (optionally multipart HTML) email.

    Returns True when the SMTP server accepted the message. Failures are
    logged and reported as False.
    """
    if not email_configured():
        logger.info(f"SMTP not configured, email to {to_email} not sent: {subject}")
        return False

    message = build_message(to_email, subject, body, html_body)
    try:
        await asyncio.to_thread(_deliver, to_email, message)
    except smtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed: {e}")
        return False
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email to {to_email} failed: {e}")
        return False

    logger.info(f"Email sent to {to_email}: {subject}")
    return True
