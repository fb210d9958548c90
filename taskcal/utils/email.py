import logging

import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from taskcal.config import settings

logger = logging.getLogger(__name__)


async def send_email_async(subject: str, body: str, to_email: str) -> bool:
    """
    Asynchronous email sending function using aiosmtplib.

    Returns False without sending when SMTP is not configured. Delivery
    errors propagate so the outbox worker can record them.
    """
    if not settings.EMAIL_HOST:
        logger.info("[EMAIL SKIPPED] SMTP not configured - %s...", subject[:50])
        return False

    msg = MIMEMultipart()
    msg["From"] = settings.EMAIL_FROM or settings.EMAIL_USER or ""
    msg["To"] = to_email
    msg["Subject"] = subject

    msg.attach(MIMEText(body, "plain"))

    # STARTTLS on the submission port
    await aiosmtplib.send(
        msg,
        hostname=settings.EMAIL_HOST,
        port=settings.EMAIL_PORT,
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        start_tls=True,
        timeout=10
    )
    logger.info("[EMAIL SENT] To %s: %s", to_email, subject)
    return True
