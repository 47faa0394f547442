"""
Keeps the visit and meeting events of a schedule in step with its dates.
"""

import logging
from typing import Optional

from django.conf import settings

from apps.schedules.models import Event, EventAudience, EventType, ShelterSchedule

from .event_notifications import (
    event_snapshot,
    notify_event_created,
    notify_event_updated,
    notify_event_deleted,
)

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = 'To be defined'


def _team_info(team) -> str:
    return f"Team {team.number} - {team.shelter.name}"


def build_visit_event_data(schedule: ShelterSchedule) -> dict:
    team = schedule.team
    shelter = team.shelter
    team_info = _team_info(team)
    return {
        'title': f"Visit - {team_info}",
        'description': f"{schedule.lesson_content}\n\n{team_info}",
        'date': schedule.visit_date,
        'location': shelter.address_line() or shelter.name or UNKNOWN_LOCATION,
        'audience': EventAudience.MEMBERS,
    }


def build_meeting_event_data(schedule: ShelterSchedule) -> dict:
    team_info = _team_info(schedule.team)
    return {
        'title': f"Meeting - {team_info}",
        'description': f"{schedule.observation or 'Planning meeting'}\n\n{team_info}",
        'date': schedule.meeting_date,
        'location': schedule.meeting_room or settings.DEFAULT_MEETING_LOCATION,
        'audience': EventAudience.MEMBERS,
    }


def _sync_event(
    schedule: ShelterSchedule,
    event_type: str,
    existing: Optional[Event],
    data: Optional[dict],
) -> Optional[Event]:
    if data is None:
        if existing is not None:
            notify_event_deleted(existing)
            existing.delete()
            logger.info("Deleted %s event for schedule %s", event_type, schedule.id)
        return None

    if existing is None:
        event = Event.objects.create(schedule=schedule, event_type=event_type, **data)
        notify_event_created(event)
        logger.info("Created %s event %s for schedule %s", event_type, event.id, schedule.id)
        return event

    changed = [key for key, value in data.items() if getattr(existing, key) != value]
    if changed:
        before = event_snapshot(existing)
        for key in changed:
            setattr(existing, key, data[key])
        existing.save(update_fields=changed + ['updated_at'])
        notify_event_updated(before, existing)
        logger.info("Updated %s event %s (%s)", event_type, existing.id, ', '.join(changed))
    else:
        logger.debug("No changes for %s event %s", event_type, existing.id)
    return existing


def sync_schedule_events(schedule: ShelterSchedule) -> None:
    """Create, update or delete the schedule's visit and meeting events."""
    existing = {event.event_type: event for event in schedule.events.all()}

    visit_data = build_visit_event_data(schedule) if schedule.visit_date else None
    meeting_data = build_meeting_event_data(schedule) if schedule.meeting_date else None

    _sync_event(schedule, EventType.VISIT, existing.get(EventType.VISIT), visit_data)
    _sync_event(schedule, EventType.MEETING, existing.get(EventType.MEETING), meeting_data)
