import logging
import smtplib
from email.message import EmailMessage

from profesiones.core.config import settings

logger = logging.getLogger("profesiones.email")


def send_email(to_email: str, subject: str, body: str):
    """Send an HTML email over SMTP SSL; logs instead when SMTP is not configured."""
    if not settings.SMTP_SERVER:
        logger.warning("SMTP not configured; email to %s not sent (%s)\n%s", to_email, subject, body)
        return

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.SMTP_USER
    msg["To"] = to_email
    msg.set_content("Tu cliente de correo no soporta HTML.")
    msg.add_alternative(body, subtype="html")

    try:
        with smtplib.SMTP_SSL(settings.SMTP_SERVER, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT) as smtp:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            smtp.send_message(msg)
            logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        raise


def get_mailer():
    """FastAPI dependency returning the delivery function."""
    return send_email
