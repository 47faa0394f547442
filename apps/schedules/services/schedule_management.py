"""
Shelter schedule management service.

Every write goes through sync_schedule_events so the calendar always
mirrors the schedule dates.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet, F
from django.db.models.functions import Least, Coalesce

from apps.accounts.models import User, UserRole
from apps.schedules.models import ShelterSchedule
from apps.shelters.models import Team

from .event_sync import sync_schedule_events
from .event_notifications import notify_event_deleted
from .exceptions import (
    ScheduleNotFoundError,
    TeamNotFoundError,
    DuplicateVisitNumberError,
    ScheduleAccessError,
)

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = (
    'visit_number', 'visit_date', 'meeting_date',
    'lesson_content', 'observation', 'meeting_room',
)


def _assert_can_manage(user: Optional[User], team: Team) -> None:
    if user is None or user.role == UserRole.ADMIN:
        return
    if user.role == UserRole.LEADER and team.leaders.filter(user=user).exists():
        return
    raise ScheduleAccessError("You can only manage schedules of teams you lead")


def _get_team(team_id: UUID) -> Team:
    try:
        return Team.objects.select_related('shelter').get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")


def get_schedule_by_id(*, schedule_id: UUID) -> ShelterSchedule:
    try:
        return (
            ShelterSchedule.objects
            .select_related('team__shelter')
            .get(id=schedule_id)
        )
    except ShelterSchedule.DoesNotExist:
        raise ScheduleNotFoundError(f"Shelter schedule with ID {schedule_id} not found")


@transaction.atomic
def create_schedule(
    *,
    team_id: UUID,
    visit_number: int,
    lesson_content: str,
    visit_date: Optional[date] = None,
    meeting_date: Optional[date] = None,
    observation: str = "",
    meeting_room: str = "",
    user: Optional[User] = None,
) -> ShelterSchedule:
    """
    Create a schedule and its calendar events.

    A visit event is created when visit_date is set and a meeting event
    when meeting_date is set.

    Args:
        team_id: Team the schedule belongs to
        visit_number: Sequential visit number, unique per team
        lesson_content: What will be taught at the visit
        visit_date: Day of the visit, optional
        meeting_date: Day of the planning meeting, optional
        observation: Free notes
        meeting_room: Meeting room, defaults to the main meeting place
        user: Acting user; leaders may only schedule their own teams

    Raises:
        TeamNotFoundError: If team doesn't exist
        ScheduleAccessError: If a leader doesn't lead the team
        DuplicateVisitNumberError: If the visit number is taken for the team
    """
    team = _get_team(team_id)
    _assert_can_manage(user, team)

    if ShelterSchedule.objects.filter(team=team, visit_number=visit_number).exists():
        raise DuplicateVisitNumberError(
            f"A schedule for this team with visit number {visit_number} already exists"
        )

    try:
        schedule = ShelterSchedule.objects.create(
            team=team,
            visit_number=visit_number,
            visit_date=visit_date,
            meeting_date=meeting_date,
            lesson_content=lesson_content,
            observation=observation,
            meeting_room=meeting_room,
        )
    except IntegrityError:
        raise DuplicateVisitNumberError(
            f"A schedule for this team with visit number {visit_number} already exists"
        )

    sync_schedule_events(schedule)
    logger.info("Created schedule %s for team %s (visit %d)", schedule.id, team.id, visit_number)
    return schedule


@transaction.atomic
def update_schedule(
    *,
    schedule_id: UUID,
    user: Optional[User] = None,
    team_id: Optional[UUID] = None,
    **fields,
) -> ShelterSchedule:
    """
    Update a schedule and resynchronise its events.

    Events are created when a date appears, updated when their content
    changed and deleted when their date is cleared.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        TeamNotFoundError: If the new team doesn't exist
        ScheduleAccessError: If a leader doesn't lead the old or new team
        DuplicateVisitNumberError: If team + visit number clashes with another schedule
    """
    try:
        schedule = (
            ShelterSchedule.objects
            .select_for_update()
            .select_related('team__shelter')
            .get(id=schedule_id)
        )
    except ShelterSchedule.DoesNotExist:
        raise ScheduleNotFoundError(f"Shelter schedule with ID {schedule_id} not found")

    _assert_can_manage(user, schedule.team)

    update_fields = []
    if team_id is not None and team_id != schedule.team_id:
        team = _get_team(team_id)
        _assert_can_manage(user, team)
        schedule.team = team
        update_fields.append('team')

    for key, value in fields.items():
        if key in SCHEDULE_FIELDS:
            setattr(schedule, key, value)
            update_fields.append(key)

    if 'visit_number' in update_fields or 'team' in update_fields:
        clash = (
            ShelterSchedule.objects
            .filter(team_id=schedule.team_id, visit_number=schedule.visit_number)
            .exclude(id=schedule.id)
            .exists()
        )
        if clash:
            raise DuplicateVisitNumberError(
                f"A schedule for this team with visit number {schedule.visit_number} already exists"
            )

    if update_fields:
        update_fields.append('updated_at')
        schedule.save(update_fields=update_fields)

    sync_schedule_events(schedule)
    logger.info("Updated schedule %s", schedule.id)
    return schedule


@transaction.atomic
def delete_schedule(*, schedule_id: UUID, user: Optional[User] = None) -> None:
    """Delete a schedule; its events and attendance records cascade."""
    schedule = get_schedule_by_id(schedule_id=schedule_id)
    _assert_can_manage(user, schedule.team)
    for event in schedule.events.all():
        notify_event_deleted(event)
    schedule.delete()
    logger.info("Deleted schedule %s", schedule_id)


def list_schedules_for_user(*, user: User, team_id: Optional[UUID] = None) -> QuerySet:
    """
    Schedules visible to the user, earliest date first.

    Admins see all, leaders their led teams and members their own team.
    """
    queryset = ShelterSchedule.objects.select_related('team__shelter')
    if user.role == UserRole.LEADER:
        queryset = queryset.filter(team__leaders__user=user).distinct()
    elif user.role != UserRole.ADMIN:
        queryset = queryset.filter(team__members__user=user)

    if team_id:
        queryset = queryset.filter(team_id=team_id)

    return queryset.annotate(
        first_slot=Coalesce(
            Least(F('visit_date'), F('meeting_date')),
            F('visit_date'),
            F('meeting_date'),
        )
    ).order_by(F('first_slot').asc(nulls_last=True), 'visit_number')
