"""Schedules app services layer."""

from .exceptions import (
    SchedulesServiceError,
    ScheduleNotFoundError,
    EventNotFoundError,
    TeamNotFoundError,
    DuplicateVisitNumberError,
    ScheduleAccessError,
)

from .schedule_management import (
    create_schedule,
    update_schedule,
    delete_schedule,
    get_schedule_by_id,
    list_schedules_for_user,
)

from .event_management import (
    create_event,
    update_event,
    delete_event,
    list_events_for_user,
)

from .event_sync import sync_schedule_events

from .event_notifications import (
    notify_event_created,
    notify_event_updated,
    notify_event_deleted,
    send_event_email,
)

from .audience import VISIBLE_AUDIENCES, audience_recipients

__all__ = [
    # Exceptions
    'SchedulesServiceError',
    'ScheduleNotFoundError',
    'EventNotFoundError',
    'TeamNotFoundError',
    'DuplicateVisitNumberError',
    'ScheduleAccessError',
    # Schedules
    'create_schedule',
    'update_schedule',
    'delete_schedule',
    'get_schedule_by_id',
    'list_schedules_for_user',
    # Events
    'create_event',
    'update_event',
    'delete_event',
    'list_events_for_user',
    'sync_schedule_events',
    # Notifications
    'notify_event_created',
    'notify_event_updated',
    'notify_event_deleted',
    'send_event_email',
    'VISIBLE_AUDIENCES',
    'audience_recipients',
]
