"""
E-mails an event's audience when the event is created, changed or
cancelled.

Recipients are resolved and mail is sent once the surrounding
transaction commits, one message per recipient. An audience change
tells users who gained access about a new event, users who lost it that
the event is gone for them, and everyone else that the audience changed.
"""

import logging
from typing import List, Optional, Tuple

from django.conf import settings
from django.db import transaction

from apps.accounts.models import UserRole
from apps.communication.services import send_templated_email
from apps.schedules.models import Event

from .audience import can_see, audience_recipients, role_recipients

logger = logging.getLogger(__name__)

CREATED = 'created'
UPDATED = 'updated'
DELETED = 'deleted'
AUDIENCE_CHANGED = 'audience_changed'
DATE_CHANGED = 'date_changed'
LOCATION_CHANGED = 'location_changed'
LOST_ACCESS = 'lost_access'

ACTION_MESSAGES = {
    CREATED: {
        'subject': 'New event',
        'heading': 'New event',
        'verb': 'was created',
        'description': 'A new event was added to the calendar. Check the details below.',
        'call_to_action': 'We hope to see you there!',
    },
    UPDATED: {
        'subject': 'Event updated',
        'heading': 'Event updated',
        'verb': 'was updated',
        'description': 'The event details changed. Please check them below.',
        'call_to_action': 'Keep an eye on the changes!',
    },
    DELETED: {
        'subject': 'Event cancelled',
        'heading': 'Event cancelled',
        'verb': 'was cancelled',
        'description': 'Unfortunately this event was cancelled.',
        'call_to_action': 'Stay tuned for the next events!',
    },
    AUDIENCE_CHANGED: {
        'subject': 'Event audience changed',
        'heading': 'Audience changed',
        'verb': 'now has a different audience',
        'description': 'The audience of this event changed. Check the details below.',
        'call_to_action': 'Stay tuned!',
    },
    DATE_CHANGED: {
        'subject': 'Event date changed',
        'heading': 'New date',
        'verb': 'changed date',
        'description': 'This event moved to another day.',
        'call_to_action': 'Update your calendar!',
    },
    LOCATION_CHANGED: {
        'subject': 'Event location changed',
        'heading': 'New location',
        'verb': 'changed location',
        'description': 'This event moved to another place.',
        'call_to_action': 'Mind the new address!',
    },
    LOST_ACCESS: {
        'subject': 'Event no longer available',
        'heading': 'Event not available',
        'verb': 'is no longer available to you',
        'description': 'The audience of this event changed and it is no longer meant for your role.',
        'call_to_action': 'Stay tuned for the next events!',
    },
}

NOTIFIED_FIELDS = ('title', 'description', 'date', 'location', 'audience')


def event_snapshot(event: Event) -> dict:
    return {field: getattr(event, field) for field in NOTIFIED_FIELDS}


def update_action(before: dict, after: dict) -> Optional[str]:
    """Action for a content change, None when nothing the audience sees changed."""
    changed = {field for field in NOTIFIED_FIELDS if field != 'audience' and before[field] != after[field]}
    if not changed:
        return None
    if changed == {'date'}:
        return DATE_CHANGED
    if changed == {'location'}:
        return LOCATION_CHANGED
    return UPDATED


def audience_change_plan(old: str, new: str) -> List[Tuple[str, List[str]]]:
    """(action, roles) pairs for an audience switch."""
    gained, lost, kept = [], [], []
    for role in UserRole.values:
        could, can = can_see(role, old), can_see(role, new)
        if can and not could:
            gained.append(role)
        elif could and not can:
            lost.append(role)
        elif can:
            kept.append(role)
    plan = [(CREATED, gained), (LOST_ACCESS, lost), (AUDIENCE_CHANGED, kept)]
    return [(action, roles) for action, roles in plan if roles]


def send_event_email(snapshot: dict, action: str, recipients: List[str]) -> int:
    """Send one e-mail per recipient, returns how many went out."""
    messages = ACTION_MESSAGES[action]
    context = {'event': snapshot, 'action': action, **messages}

    sent = 0
    for email in recipients:
        if send_templated_email(to=[email], subject=messages['subject'], template='event', context=context):
            sent += 1

    logger.info(
        "Event %s notification '%s' sent to %d of %d recipient(s)",
        action, snapshot['title'], sent, len(recipients),
    )
    return sent


def _deliver(snapshot: dict, action: str, roles: Optional[List[str]] = None) -> None:
    recipients = role_recipients(roles) if roles is not None else audience_recipients(snapshot['audience'])
    if not recipients:
        logger.warning("No recipients for event notification (audience %s)", snapshot['audience'])
        return
    send_event_email(snapshot, action, recipients)


def _queue(snapshot: dict, action: str, roles: Optional[List[str]] = None) -> None:
    if not settings.EVENT_EMAIL_NOTIFICATIONS:
        logger.debug("Event e-mail notifications are disabled, skipping '%s'", snapshot['title'])
        return
    transaction.on_commit(lambda: _deliver(snapshot, action, roles))


def notify_event_created(event: Event) -> None:
    _queue(event_snapshot(event), CREATED)


def notify_event_deleted(event: Event) -> None:
    _queue(event_snapshot(event), DELETED)


def notify_event_updated(before: dict, event: Event) -> None:
    after = event_snapshot(event)
    if before['audience'] != after['audience']:
        for action, roles in audience_change_plan(before['audience'], after['audience']):
            _queue(after, action, roles)
        return

    action = update_action(before, after)
    if action is None:
        logger.debug("No notified changes on event %s", event.id)
        return
    _queue(after, action)
