"""
Attendance writes.

Both writers upsert on (member, schedule, category): a second mark for
the same slot replaces the first.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.attendance.models import Attendance, AttendanceCategory
from apps.schedules.models import ShelterSchedule

from ..exceptions import (
    ScheduleNotFoundError,
    ScheduleDateMissingError,
    ScheduleTeamMismatchError,
    MemberNotInTeamError,
    EmptyAttendanceListError,
)
from .access import assert_leader_access, assert_team_membership

logger = logging.getLogger(__name__)


def _get_schedule(schedule_id: UUID) -> ShelterSchedule:
    try:
        return ShelterSchedule.objects.select_related('team__shelter').get(id=schedule_id)
    except ShelterSchedule.DoesNotExist:
        raise ScheduleNotFoundError()


def _assert_slot_dated(schedule: ShelterSchedule, category: str) -> None:
    if schedule.date_for(category) is None:
        raise ScheduleDateMissingError(
            f"Cannot register {category} attendance: the schedule has no {category} date."
        )


def _upsert(member_id, schedule, attendance_type, comment, category) -> Attendance:
    attendance, created = Attendance.objects.update_or_create(
        member_id=member_id,
        schedule=schedule,
        category=category,
        defaults={'type': attendance_type, 'comment': comment},
    )
    logger.debug(
        "%s %s attendance for member %s on schedule %s",
        'Created' if created else 'Updated', category, member_id, schedule.id,
    )
    return attendance


@transaction.atomic
def register_attendance(
    *,
    user: User,
    schedule_id: UUID,
    type: str,
    comment: Optional[str] = None,
    category: str = AttendanceCategory.VISIT,
) -> Attendance:
    """
    Record the user's own presence or absence at a schedule slot.

    Raises:
        ScheduleNotFoundError: If schedule doesn't exist (404)
        ScheduleDateMissingError: If the slot has no date (403)
        NotTeamMemberError: If the user is not on the schedule's team (403)
    """
    schedule = _get_schedule(schedule_id)
    _assert_slot_dated(schedule, category)
    assert_team_membership(user, schedule.team_id)

    attendance = _upsert(user.id, schedule, type, comment, category)
    logger.info("Attendance registered by %s for schedule %s (%s)", user.id, schedule.id, category)
    return attendance


@transaction.atomic
def register_team_attendance(
    *,
    user: User,
    team_id: UUID,
    schedule_id: UUID,
    attendances: Iterable[dict],
    category: str = AttendanceCategory.VISIT,
) -> List[Attendance]:
    """
    Record attendance for several team members at once (leaders).

    Each entry is a dict with member_id, type and optional comment. All
    rows are written in one transaction: one bad member id rolls back
    the whole batch.

    Raises:
        NotTeamLeaderError: If the user doesn't lead the team (403)
        ScheduleNotFoundError: If schedule doesn't exist (404)
        ScheduleDateMissingError: If the slot has no date (403)
        ScheduleTeamMismatchError: If the schedule belongs to another team (403)
        MemberNotInTeamError: If an entry names a non-member (400)
        EmptyAttendanceListError: If no entries are given (400)
    """
    entries = list(attendances)
    if not entries:
        raise EmptyAttendanceListError()

    assert_leader_access(user, team_id)

    schedule = _get_schedule(schedule_id)
    _assert_slot_dated(schedule, category)
    if str(schedule.team_id) != str(team_id):
        raise ScheduleTeamMismatchError()

    member_ids = {
        str(member_id)
        for member_id in schedule.team.member_users().values_list('id', flat=True)
    }

    results = []
    for entry in entries:
        member_id = entry['member_id']
        if str(member_id) not in member_ids:
            raise MemberNotInTeamError(f"Member {member_id} not found in team.")
        results.append(
            _upsert(member_id, schedule, entry['type'], entry.get('comment'), category)
        )

    logger.info(
        "Team attendance registered by %s: %d record(s) for schedule %s (%s)",
        user.id, len(results), schedule.id, category,
    )
    return results
