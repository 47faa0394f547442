"""
Outgoing notification channels.

E-mail goes through Django's configured backend (SMTP towards SES in
production), WhatsApp through the Twilio REST client. Both log failures
and return False.
"""

import logging
from typing import Optional, Sequence

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

logger = logging.getLogger(__name__)


def send_email(
    *,
    to: Sequence[str],
    subject: str,
    text_body: str,
    html_body: Optional[str] = None,
) -> bool:
    recipients = [address for address in to if address]
    if not recipients:
        logger.warning("No recipients for e-mail '%s', skipping", subject)
        return False

    message = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
    )
    if html_body:
        message.attach_alternative(html_body, 'text/html')

    try:
        message.send()
    except OSError:
        logger.exception("Failed to send e-mail '%s' to %s", subject, ', '.join(recipients))
        return False

    logger.info("E-mail '%s' sent to %s", subject, ', '.join(recipients))
    return True


def whatsapp_configured() -> bool:
    return all((
        settings.TWILIO_ACCOUNT_SID,
        settings.TWILIO_AUTH_TOKEN,
        settings.TWILIO_WHATSAPP_FROM,
    ))


def send_whatsapp(*, body: str, to: Optional[str] = None) -> bool:
    """Send a WhatsApp message; `to` defaults to TWILIO_WHATSAPP_TO."""
    to = to or settings.TWILIO_WHATSAPP_TO
    if not whatsapp_configured() or not to:
        logger.warning("WhatsApp is not configured, skipping message")
        return False

    try:
        client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        message = client.messages.create(
            body=body,
            from_=settings.TWILIO_WHATSAPP_FROM,
            to=to,
        )
    except (TwilioException, OSError):
        logger.exception("Failed to send WhatsApp message to %s", to)
        return False

    logger.info("WhatsApp message %s sent to %s", message.sid, to)
    return True
