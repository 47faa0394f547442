from .notifications import (
    send_email,
    send_whatsapp,
    whatsapp_configured,
)
from .emails import (
    render_email,
    send_templated_email,
)
from .contact_management import (
    create_contact,
    notify_contact,
    list_contacts,
    mark_contact_read,
    delete_contact,
)
from .reminders import (
    collect_leader_reminders,
    send_attendance_reminders,
)
from .exceptions import (
    CommunicationServiceError,
    ContactNotFoundError,
)

__all__ = [
    'send_email',
    'send_whatsapp',
    'whatsapp_configured',
    'render_email',
    'send_templated_email',
    'create_contact',
    'notify_contact',
    'list_contacts',
    'mark_contact_read',
    'delete_contact',
    'collect_leader_reminders',
    'send_attendance_reminders',
    'CommunicationServiceError',
    'ContactNotFoundError',
]
