import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import requests

from verification_provider.platform.config import settings
from verification_provider.platform.logger import get_logger

logger = get_logger("email_service")


class EmailDeliveryError(Exception):
    """Raised when neither the relay nor SMTP accepted the message."""


def send_email(to_email: str, subject: str, html_body: str, plain_text: str = ""):
    """
    Send email via HTTP relay service.
    Falls back to direct SMTP if the relay is not configured or fails.
    """
    if settings.EMAIL_RELAY_URL and settings.EMAIL_RELAY_API_KEY:
        try:
            send_email_via_relay(to_email, subject, html_body, plain_text)
            return
        except EmailDeliveryError as e:
            logger.error(f"Email relay failed: {str(e)}")
            logger.info("Attempting direct SMTP as fallback...")
    else:
        logger.warning("Email relay not configured, attempting direct SMTP")

    send_email_direct_smtp(to_email, subject, html_body, plain_text)


def send_email_via_relay(to_email: str, subject: str, html_body: str, plain_text: str = ""):
    """Send email via HTTP relay service"""
    payload = {
        "to_email": to_email,
        "subject": subject,
        "body": html_body,
        "plain_text": plain_text,
        "from_address": settings.MAIL_FROM_ADDRESS,
    }

    headers = {
        "X-API-Key": settings.EMAIL_RELAY_API_KEY,
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(
            settings.EMAIL_RELAY_URL,
            json=payload,
            headers=headers,
            timeout=settings.EMAIL_RELAY_TIMEOUT,
        )
        response.raise_for_status()

    except requests.exceptions.Timeout as e:
        logger.error(f"Email relay timeout for {to_email}")
        raise EmailDeliveryError("Email relay service timeout") from e

    except requests.exceptions.RequestException as e:
        logger.error(f"Email relay request failed: {str(e)}")
        if getattr(e, "response", None) is not None:
            logger.error(f"Response status: {e.response.status_code}")
        raise EmailDeliveryError(f"Email relay service error: {str(e)}") from e

    logger.info(f"Email sent via relay to {to_email}")


def build_mime_message(to_email: str, subject: str, html_body: str, plain_text: str = "") -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.MAIL_FROM_NAME} <{settings.MAIL_FROM_ADDRESS}>"
    msg["To"] = to_email

    # Clients render the last alternative they understand, so HTML goes last
    if plain_text:
        msg.attach(MIMEText(plain_text, "plain"))
    msg.attach(MIMEText(html_body, "html"))
    return msg


def send_email_direct_smtp(to_email: str, subject: str, html_body: str, plain_text: str = ""):
    """Send email via SMTP"""
    msg = build_mime_message(to_email, subject, html_body, plain_text)
    port = settings.MAIL_PORT

    try:
        if port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(settings.MAIL_HOST, port, context=context) as server:
                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
                server.sendmail(settings.MAIL_FROM_ADDRESS, to_email, msg.as_string())
        else:
            with smtplib.SMTP(settings.MAIL_HOST, port) as server:
                server.ehlo()

                if str(settings.MAIL_ENCRYPTION).upper() in ["TLS", "TRUE"]:
                    server.starttls()
                    server.ehlo()

                server.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
                server.sendmail(settings.MAIL_FROM_ADDRESS, to_email, msg.as_string())

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"CRITICAL EMAIL ERROR: {str(e)}")
        raise EmailDeliveryError(str(e)) from e

    logger.info(f"Email sent via SMTP to {to_email}")
