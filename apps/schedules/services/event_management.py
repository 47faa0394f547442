"""Event management service."""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.schedules.models import Event, EventAudience, EventType

from .audience import VISIBLE_AUDIENCES
from .event_notifications import (
    event_snapshot,
    notify_event_created,
    notify_event_updated,
    notify_event_deleted,
)
from .exceptions import EventNotFoundError

logger = logging.getLogger(__name__)

EVENT_FIELDS = ('title', 'description', 'date', 'location', 'audience')


@transaction.atomic
def create_event(
    *,
    title: str,
    date: date,
    description: str = "",
    location: str = "",
    audience: str = EventAudience.ALL,
) -> Event:
    event = Event.objects.create(
        title=title,
        date=date,
        description=description,
        location=location,
        audience=audience,
        event_type=EventType.CUSTOM,
    )
    logger.info("Created event %s on %s", event.id, event.date)
    notify_event_created(event)
    return event


@transaction.atomic
def update_event(*, event_id: UUID, **fields) -> Event:
    """
    Update an event.

    Raises:
        EventNotFoundError: If event doesn't exist
    """
    try:
        event = Event.objects.select_for_update().get(id=event_id)
    except Event.DoesNotExist:
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    before = event_snapshot(event)
    update_fields = [key for key in fields if key in EVENT_FIELDS]
    for key in update_fields:
        setattr(event, key, fields[key])

    if update_fields:
        event.save(update_fields=update_fields + ['updated_at'])
        notify_event_updated(before, event)
    return event


@transaction.atomic
def delete_event(*, event_id: UUID) -> None:
    try:
        event = Event.objects.get(id=event_id)
    except Event.DoesNotExist:
        raise EventNotFoundError(f"Event with ID {event_id} not found")

    notify_event_deleted(event)
    event.delete()
    logger.info("Deleted event %s", event_id)


def list_events_for_user(
    *,
    user: User,
    upcoming_only: bool = False,
    today: Optional[date] = None,
) -> QuerySet:
    """
    Events the user's role may see.

    Members see 'all' and 'members' events, leaders also 'leaders'
    events, admins everything.
    """
    queryset = Event.objects.select_related('schedule__team__shelter')
    if user.role != UserRole.ADMIN:
        queryset = queryset.filter(audience__in=VISIBLE_AUDIENCES.get(user.role, [EventAudience.ALL]))

    if upcoming_only:
        queryset = queryset.filter(date__gte=today or timezone.localdate())

    return queryset.order_by('date', 'title')
