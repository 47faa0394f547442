"""
Visit report service.

A report can only be filed for a schedule whose visit already happened
(visit date on or before today), by an admin or a leader of the team.
"""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User, UserRole
from apps.schedules.models import ShelterSchedule
from apps.shelters.models import Team
from apps.visit_reports.models import VisitReport

from .exceptions import (
    VisitReportNotFoundError,
    ScheduleNotFoundError,
    VisitNotHappenedError,
    DuplicateVisitReportError,
    ReportAccessError,
)

logger = logging.getLogger(__name__)

REPORT_FIELDS = (
    'team_members_present',
    'sheltered_heard_message',
    'caretakers_heard_message',
    'sheltered_decisions',
    'caretakers_decisions',
    'observation',
)


def _leads_team(user: User, team_id: UUID) -> bool:
    return (
        user.role == UserRole.LEADER
        and Team.objects.filter(id=team_id, leaders__user=user).exists()
    )


def _assert_can_manage(user: User, schedule: ShelterSchedule) -> None:
    if user.role == UserRole.ADMIN or _leads_team(user, schedule.team_id):
        return
    raise ReportAccessError("You can only manage reports of teams you lead")


def _visible_reports(user: User) -> QuerySet:
    queryset = VisitReport.objects.select_related('schedule__team__shelter')
    if user.role == UserRole.ADMIN:
        return queryset
    if user.role == UserRole.LEADER:
        return queryset.filter(schedule__team__leaders__user=user).distinct()
    return queryset.none()


def get_visit_report(*, report_id: UUID, user: User) -> VisitReport:
    """
    Raises:
        VisitReportNotFoundError: If the report doesn't exist or is not visible
    """
    try:
        return _visible_reports(user).get(id=report_id)
    except VisitReport.DoesNotExist:
        raise VisitReportNotFoundError(f"Visit report with ID {report_id} not found")


@transaction.atomic
def create_visit_report(
    *,
    user: User,
    schedule_id: UUID,
    today: date,
    team_members_present: int = 0,
    sheltered_heard_message: int = 0,
    caretakers_heard_message: int = 0,
    sheltered_decisions: int = 0,
    caretakers_decisions: int = 0,
    observation: Optional[str] = None,
) -> VisitReport:
    """
    File the report of a past visit.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist
        VisitNotHappenedError: If the visit has no date or is after today
        ReportAccessError: If the user doesn't lead the schedule's team
        DuplicateVisitReportError: If the schedule already has a report
    """
    try:
        schedule = (
            ShelterSchedule.objects
            .select_for_update()
            .select_related('team__shelter')
            .get(id=schedule_id)
        )
    except ShelterSchedule.DoesNotExist:
        raise ScheduleNotFoundError(f"Schedule with ID {schedule_id} not found")

    if schedule.visit_date is None or schedule.visit_date > today:
        raise VisitNotHappenedError("Reports can only be filed after the visit took place")

    _assert_can_manage(user, schedule)

    if VisitReport.objects.filter(schedule=schedule).exists():
        raise DuplicateVisitReportError(
            f"A visit report for schedule {schedule_id} already exists. Use update instead."
        )

    try:
        report = VisitReport.objects.create(
            schedule=schedule,
            team_members_present=team_members_present,
            sheltered_heard_message=sheltered_heard_message,
            caretakers_heard_message=caretakers_heard_message,
            sheltered_decisions=sheltered_decisions,
            caretakers_decisions=caretakers_decisions,
            observation=observation,
        )
    except IntegrityError:
        raise DuplicateVisitReportError(
            f"A visit report for schedule {schedule_id} already exists. Use update instead."
        )

    logger.info("Visit report %s created for schedule %s by %s", report.id, schedule.id, user.id)
    return report


@transaction.atomic
def update_visit_report(*, report_id: UUID, user: User, **fields) -> VisitReport:
    """
    Partial update; only the counters and the observation can change.

    Raises:
        VisitReportNotFoundError: If report doesn't exist
        ReportAccessError: If the user doesn't lead the schedule's team
    """
    try:
        report = (
            VisitReport.objects
            .select_for_update()
            .select_related('schedule__team__shelter')
            .get(id=report_id)
        )
    except VisitReport.DoesNotExist:
        raise VisitReportNotFoundError(f"Visit report with ID {report_id} not found")

    _assert_can_manage(user, report.schedule)

    changed = [name for name in REPORT_FIELDS if name in fields]
    for name in changed:
        setattr(report, name, fields[name])
    if changed:
        report.save(update_fields=changed + ['updated_at'])
        logger.info("Visit report %s updated by %s", report.id, user.id)
    return report


@transaction.atomic
def delete_visit_report(*, report_id: UUID, user: User) -> None:
    """
    Raises:
        VisitReportNotFoundError: If report doesn't exist
        ReportAccessError: If the user doesn't lead the schedule's team
    """
    try:
        report = VisitReport.objects.select_related('schedule').get(id=report_id)
    except VisitReport.DoesNotExist:
        raise VisitReportNotFoundError(f"Visit report with ID {report_id} not found")

    _assert_can_manage(user, report.schedule)
    report.delete()
    logger.info("Visit report %s deleted by %s", report_id, user.id)


def list_visit_reports_for_user(
    *,
    user: User,
    schedule_id: Optional[UUID] = None,
    team_id: Optional[UUID] = None,
    shelter_id: Optional[UUID] = None,
) -> QuerySet:
    """Admins see every report, leaders those of their teams, members none."""
    queryset = _visible_reports(user)
    if schedule_id:
        queryset = queryset.filter(schedule_id=schedule_id)
    if team_id:
        queryset = queryset.filter(schedule__team_id=team_id)
    if shelter_id:
        queryset = queryset.filter(schedule__team__shelter_id=shelter_id)
    return queryset.order_by('-schedule__visit_date', '-created_at')


def find_pending_visit_reports(*, user: User, today: date) -> List[ShelterSchedule]:
    """Schedules of the user's led teams (every team for admins) whose
    visit is over and still has no report. Newest visit first."""
    if user.role not in (UserRole.ADMIN, UserRole.LEADER):
        return []

    queryset = ShelterSchedule.objects.filter(
        visit_date__isnull=False,
        visit_date__lte=today,
        visit_report__isnull=True,
    )
    if user.role == UserRole.LEADER:
        queryset = queryset.filter(team__leaders__user=user).distinct()

    return list(
        queryset
        .select_related('team__shelter')
        .order_by('-visit_date', 'team__number')
    )
