import logging
import smtplib
from email.message import EmailMessage

from .config import settings

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, html: str) -> tuple[bool, str]:
    if not settings.SMTP_HOST or not settings.SMTP_USER or not settings.SMTP_PASSWORD or not settings.SMTP_FROM:
        logger.warning("[mailer] SMTP is not configured; message to %s not sent", to_email)
        return False, "SMTP is not configured. Set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASSWORD, SMTP_FROM."

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg.set_content("Abra este e-mail em um cliente com suporte a HTML.")
    msg.add_alternative(html, subtype="html")

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
            server.starttls()
            server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(msg)
        return True, "Email sent successfully."
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("[mailer] send to %s failed: %r", to_email, exc)
        return False, f"Email send failed: {exc}"
