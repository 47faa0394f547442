"""Contact form messages."""

import logging
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet

from apps.communication.models import Contact

from .emails import send_templated_email
from .exceptions import ContactNotFoundError
from .notifications import send_whatsapp

logger = logging.getLogger(__name__)


def build_whatsapp_message(contact: Contact) -> str:
    return (
        "*New contact received through the website*\n"
        "\n"
        f"*Name:* {contact.name}\n"
        f"*E-mail:* {contact.email}\n"
        f"*Phone:* {contact.phone or '-'}\n"
        "\n"
        "*Message:*\n"
        f"{contact.message}"
    )


def notify_contact(contact: Contact) -> None:
    """Fan a new contact out to the notification e-mails and WhatsApp."""
    recipients = list(settings.CONTACT_NOTIFICATION_EMAILS)
    if recipients:
        send_templated_email(
            to=recipients,
            subject='New contact',
            template='contact',
            context={'contact': contact},
        )
    else:
        logger.warning("CONTACT_NOTIFICATION_EMAILS is empty, skipping contact e-mail")

    send_whatsapp(body=build_whatsapp_message(contact))


@transaction.atomic
def create_contact(*, name: str, email: str, message: str, phone: str = '') -> Contact:
    """Save a contact; notifications go out once the row is committed."""
    contact = Contact.objects.create(name=name, email=email, phone=phone, message=message)
    transaction.on_commit(lambda: notify_contact(contact))
    logger.info("Contact %s received from %s", contact.id, contact.email)
    return contact


def list_contacts(*, unread_only: bool = False) -> QuerySet:
    queryset = Contact.objects.all()
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by('-created_at')


def _get_contact(contact_id: UUID) -> Contact:
    try:
        return Contact.objects.get(id=contact_id)
    except Contact.DoesNotExist:
        raise ContactNotFoundError(f"Contact with ID {contact_id} not found")


@transaction.atomic
def mark_contact_read(*, contact_id: UUID) -> Contact:
    """
    Raises:
        ContactNotFoundError: If contact doesn't exist
    """
    contact = _get_contact(contact_id)
    if not contact.is_read:
        contact.is_read = True
        contact.save(update_fields=['is_read', 'updated_at'])
    return contact


@transaction.atomic
def delete_contact(*, contact_id: UUID) -> None:
    """
    Raises:
        ContactNotFoundError: If contact doesn't exist
    """
    _get_contact(contact_id).delete()
    logger.info("Contact %s deleted", contact_id)
