"""
Attendance reads: pendings, listings, statistics.

A slot is the visit or the meeting of a schedule. A slot is pending for
a member when its date is before today and the member has no attendance
record for it. Visit and meeting are judged independently.
"""

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from django.db.models import Count, Q, QuerySet

from apps.accounts.models import User, UserRole
from apps.attendance.models import Attendance, AttendanceCategory, AttendanceType
from apps.schedules.models import ShelterSchedule
from apps.shelters.models import Team

from ..exceptions import TeamNotFoundError
from .access import (
    assert_leader_access,
    assert_team_membership,
    get_leader_team_ids,
    get_member_team_ids,
    get_user_team_ids,
)

logger = logging.getLogger(__name__)

CATEGORIES = (AttendanceCategory.VISIT, AttendanceCategory.MEETING)

RECORD_SORT_FIELDS = {
    'created_at': 'created_at',
    'visit_date': 'schedule__visit_date',
    'meeting_date': 'schedule__meeting_date',
}


# =============================================================================
# Slot helpers
# =============================================================================

def slot_location(schedule: ShelterSchedule, category: str) -> str:
    if category == AttendanceCategory.VISIT:
        return f"Shelter - {schedule.team.shelter.name}"
    return f"Meeting - {schedule.meeting_room or 'No room'}"


def _in_range(day: date, start_date: Optional[date], end_date: Optional[date]) -> bool:
    if start_date and day < start_date:
        return False
    if end_date and day > end_date:
        return False
    return True


def iter_slots(
    schedule: ShelterSchedule,
    *,
    before: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Iterable[Tuple[str, date]]:
    """Yield (category, date) for each dated slot, optionally only past ones."""
    for category in CATEGORIES:
        day = schedule.date_for(category)
        if day is None:
            continue
        if before is not None and not day < before:
            continue
        if not _in_range(day, start_date, end_date):
            continue
        yield category, day


def _schedule_range_q(start_date: Optional[date], end_date: Optional[date]) -> Q:
    """Schedules with at least one slot inside the range."""
    visit = Q(visit_date__isnull=False)
    meeting = Q(meeting_date__isnull=False)
    if start_date:
        visit &= Q(visit_date__gte=start_date)
        meeting &= Q(meeting_date__gte=start_date)
    if end_date:
        visit &= Q(visit_date__lte=end_date)
        meeting &= Q(meeting_date__lte=end_date)
    return visit | meeting


def _record_range_q(start_date: Optional[date], end_date: Optional[date]) -> Q:
    """Records whose own slot date falls inside the range."""
    visit = Q(category=AttendanceCategory.VISIT)
    meeting = Q(category=AttendanceCategory.MEETING)
    if start_date:
        visit &= Q(schedule__visit_date__gte=start_date)
        meeting &= Q(schedule__meeting_date__gte=start_date)
    if end_date:
        visit &= Q(schedule__visit_date__lte=end_date)
        meeting &= Q(schedule__meeting_date__lte=end_date)
    return visit | meeting


def _past_schedules(team_ids, today: date) -> QuerySet:
    return (
        ShelterSchedule.objects
        .filter(team_id__in=team_ids)
        .filter(Q(visit_date__lt=today) | Q(meeting_date__lt=today))
        .select_related('team__shelter')
    )


def _recorded_slots(schedules, member_ids=None) -> Set[Tuple[str, str, str]]:
    """(schedule_id, category, member_id) for every existing record."""
    queryset = Attendance.objects.filter(schedule__in=schedules)
    if member_ids is not None:
        queryset = queryset.filter(member_id__in=member_ids)
    return {
        (str(schedule_id), category, str(member_id))
        for schedule_id, category, member_id
        in queryset.values_list('schedule_id', 'category', 'member_id')
    }


def _get_team(team_id: UUID) -> Team:
    try:
        return Team.objects.select_related('shelter').get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError()


def _member_row(user: User) -> dict:
    return {
        'member_id': user.id,
        'member_name': user.name,
        'member_email': user.email,
        'role': 'member',
    }


def _sort_by_date_desc(items: List[dict]) -> List[dict]:
    return sorted(items, key=lambda item: (item['date'], item['visit_number']), reverse=True)


# =============================================================================
# Pendings
# =============================================================================

def _team_pendings(team: Team, today: date) -> List[dict]:
    members = list(team.member_users().order_by('name', 'email'))
    if not members:
        return []

    schedules = list(_past_schedules([team.id], today))
    recorded = _recorded_slots(schedules, [m.id for m in members])

    pendings = []
    for schedule in schedules:
        for category, day in iter_slots(schedule, before=today):
            missing = [
                _member_row(member)
                for member in members
                if (str(schedule.id), category, str(member.id)) not in recorded
            ]
            if not missing:
                continue
            pendings.append({
                'schedule_id': schedule.id,
                'category': category,
                'date': day,
                'location': slot_location(schedule, category),
                'visit_number': schedule.visit_number,
                'lesson_content': schedule.lesson_content,
                'team_id': team.id,
                'team_name': team.display_name,
                'shelter_name': team.shelter.name,
                'total_members': len(members),
                'pending_members': missing,
            })

    return _sort_by_date_desc(pendings)


def find_pendings_for_leader(*, user: User, team_id: UUID, today: date) -> List[dict]:
    """
    Past slots of a team with the members still missing a record.

    Slots where every member has a record are left out. Newest first.

    Raises:
        NotTeamLeaderError: If the user doesn't lead the team
        TeamNotFoundError: If team doesn't exist
    """
    assert_leader_access(user, team_id)
    team = _get_team(team_id)
    return _team_pendings(team, today)


def _member_pending_slots(
    user: User,
    today: date,
    team_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[dict]:
    team_ids = get_member_team_ids(user)
    if team_id is not None:
        team_ids = [tid for tid in team_ids if str(tid) == str(team_id)]
    if not team_ids:
        return []

    schedules = list(_past_schedules(team_ids, today))
    recorded = _recorded_slots(schedules, [user.id])

    pendings = []
    for schedule in schedules:
        team = schedule.team
        for category, day in iter_slots(
            schedule, before=today, start_date=start_date, end_date=end_date
        ):
            if (str(schedule.id), category, str(user.id)) in recorded:
                continue
            pendings.append({
                'schedule_id': schedule.id,
                'category': category,
                'date': day,
                'location': slot_location(schedule, category),
                'visit_number': schedule.visit_number,
                'lesson_content': schedule.lesson_content,
                'team_id': team.id,
                'team_number': team.number,
                'team_name': team.display_name,
                'shelter_name': team.shelter.name,
            })
    return _sort_by_date_desc(pendings)


def find_pendings_for_member(*, user: User, today: date) -> List[dict]:
    """The user's own past slots without a record, across their member teams."""
    return _member_pending_slots(user, today)


def find_all_pendings(*, user: User, today: date) -> dict:
    """
    Pendings as the user's role sees them.

    Admin: every team's missing members. Leader: missing members of the
    led teams plus their own missing slots. Member: own missing slots.
    """
    team_pendings: List[dict] = []
    my_pendings: List[dict] = []

    if user.role == UserRole.ADMIN:
        teams = Team.objects.select_related('shelter').order_by('shelter__name', 'number')
    elif user.role == UserRole.LEADER:
        teams = (
            Team.objects
            .filter(id__in=get_leader_team_ids(user))
            .select_related('shelter')
            .order_by('shelter__name', 'number')
        )
    else:
        teams = Team.objects.none()

    for team in teams:
        team_pendings.extend(_team_pendings(team, today))

    if user.role != UserRole.ADMIN:
        my_pendings = find_pendings_for_member(user=user, today=today)

    total = sum(len(item['pending_members']) for item in team_pendings) + len(my_pendings)
    logger.debug("User %s has %d pending attendance slot(s)", user.id, total)

    return {
        'role': user.role,
        'team_pendings': _sort_by_date_desc(team_pendings),
        'my_pendings': my_pendings,
        'total_pending': total,
    }


# =============================================================================
# Teams and schedules
# =============================================================================

def list_team_members(*, user: User, team_id: UUID) -> dict:
    assert_leader_access(user, team_id)
    team = _get_team(team_id)

    return {
        'team_id': team.id,
        'team_number': team.number,
        'shelter_name': team.shelter.name,
        'members': [
            {'id': member.id, 'name': member.name, 'email': member.email, 'role': 'member'}
            for member in team.member_users().order_by('name', 'email')
        ],
    }


def list_team_schedules(
    *,
    user: User,
    team_id: UUID,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    sort_order: str = 'desc',
) -> List[dict]:
    """
    One row per dated slot of the team's schedules.

    Raises:
        NotTeamMemberError: If the user is not on the team
        TeamNotFoundError: If team doesn't exist
    """
    assert_team_membership(user, team_id)
    team = _get_team(team_id)

    total_members = team.member_users().count()
    schedules = list(
        team.schedules
        .filter(_schedule_range_q(start_date, end_date))
        .select_related('team__shelter')
    )
    counts = defaultdict(int)
    for schedule_id, category, total in (
        Attendance.objects
        .filter(schedule__in=schedules)
        .order_by()
        .values_list('schedule_id', 'category')
        .annotate(total=Count('id'))
    ):
        counts[(str(schedule_id), category)] = total

    rows = []
    for schedule in schedules:
        for category, day in iter_slots(schedule, start_date=start_date, end_date=end_date):
            rows.append({
                'schedule_id': schedule.id,
                'category': category,
                'date': day,
                'visit_number': schedule.visit_number,
                'lesson_content': schedule.lesson_content,
                'observation': schedule.observation,
                'location': slot_location(schedule, category),
                'team_id': team.id,
                'team_number': team.number,
                'team_name': team.display_name,
                'shelter_name': team.shelter.name,
                'attendance_count': counts[(str(schedule.id), category)],
                'total_members': total_members,
            })

    return sorted(
        rows,
        key=lambda row: (row['date'], row['visit_number']),
        reverse=(sort_order != 'asc'),
    )


def _visible_leader_teams(user: User) -> QuerySet:
    queryset = Team.objects.select_related('shelter')
    if user.role != UserRole.ADMIN:
        queryset = queryset.filter(id__in=get_leader_team_ids(user))
    return queryset.order_by('shelter__name', 'number')


def list_leader_teams(*, user: User) -> List[dict]:
    """Teams the user leads (every team for admins) with member counts."""
    teams = _visible_leader_teams(user).annotate(member_count=Count('members'))
    return [
        {
            'team_id': team.id,
            'team_number': team.number,
            'shelter_id': team.shelter_id,
            'shelter_name': team.shelter.name,
            'description': team.description,
            'member_count': team.member_count,
        }
        for team in teams
    ]


def list_leader_teams_with_members(*, user: User) -> List[dict]:
    """Led teams grouped by shelter, each with its member list."""
    teams = _visible_leader_teams(user).prefetch_related('members__user')

    shelters: Dict[str, dict] = {}
    for team in teams:
        shelter = shelters.setdefault(str(team.shelter_id), {
            'shelter_id': team.shelter_id,
            'shelter_name': team.shelter.name,
            'teams': [],
        })
        members = sorted(
            (profile.user for profile in team.members.all()),
            key=lambda member: (member.name, member.email),
        )
        shelter['teams'].append({
            'team_id': team.id,
            'team_number': team.number,
            'description': team.description,
            'members': [
                {'id': member.id, 'name': member.name, 'email': member.email, 'role': 'member'}
                for member in members
            ],
        })
    return list(shelters.values())


# =============================================================================
# Records
# =============================================================================

def list_attendance_records(
    *,
    user: User,
    page: int = 1,
    limit: int = 20,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    team_id: Optional[UUID] = None,
    member_id: Optional[UUID] = None,
    schedule_id: Optional[UUID] = None,
    member_name: Optional[str] = None,
    sort_by: str = 'created_at',
    sort_order: str = 'desc',
) -> dict:
    """
    Filtered, sorted and paginated attendance records.

    Non-admins only see records of teams they lead or belong to.

    Returns:
        {'results': [Attendance, ...], 'meta': {page, limit, total,
        total_pages, has_next, has_prev}}
    """
    queryset = Attendance.objects.select_related('member', 'schedule__team__shelter')

    if user.role != UserRole.ADMIN:
        team_ids = get_user_team_ids(user)
        if not team_ids:
            return _page([], page, limit, 0)
        queryset = queryset.filter(schedule__team_id__in=team_ids)

    if start_date or end_date:
        queryset = queryset.filter(_record_range_q(start_date, end_date))
    if type:
        queryset = queryset.filter(type=type)
    if category:
        queryset = queryset.filter(category=category)
    if team_id:
        queryset = queryset.filter(schedule__team_id=team_id)
    if member_id:
        queryset = queryset.filter(member_id=member_id)
    if schedule_id:
        queryset = queryset.filter(schedule_id=schedule_id)
    if member_name:
        queryset = queryset.filter(member__name__icontains=member_name)

    field = RECORD_SORT_FIELDS.get(sort_by, 'created_at')
    ordering = field if sort_order == 'asc' else f'-{field}'
    queryset = queryset.order_by(ordering, 'id')

    total = queryset.count()
    offset = (page - 1) * limit
    return _page(list(queryset[offset:offset + limit]), page, limit, total)


def _page(results: list, page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'results': results,
        'meta': {
            'page': page,
            'limit': limit,
            'total': total,
            'total_pages': total_pages,
            'has_next': page < total_pages,
            'has_prev': page > 1,
        },
    }


# =============================================================================
# Statistics
# =============================================================================

def _percent(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole else 0


def get_attendance_stats(
    *,
    user: User,
    today: date,
    team_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict:
    """
    The user's own attendance summary.

    pending_count counts the user's past member slots with no record.
    """
    records = Attendance.objects.filter(member=user)
    if team_id:
        records = records.filter(schedule__team_id=team_id)
    if start_date or end_date:
        records = records.filter(_record_range_q(start_date, end_date))

    types = list(records.values_list('type', 'schedule_id'))
    total_records = len(types)
    present = sum(1 for record_type, _ in types if record_type == AttendanceType.PRESENT)
    absent = sum(1 for record_type, _ in types if record_type == AttendanceType.ABSENT)

    pending = _member_pending_slots(user, today, team_id, start_date, end_date)

    return {
        'total_events': len({schedule_id for _, schedule_id in types}),
        'total_attendance_records': total_records,
        'present_count': present,
        'absent_count': absent,
        'attendance_rate': _percent(present, total_records),
        'pending_count': len(pending),
    }


def get_team_attendance_stats(
    *,
    user: User,
    team_id: UUID,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> dict:
    """
    Team summary over its past dated slots.

    expected_records is past slots times current members; records for
    future slots or former members are not counted.

    Raises:
        NotTeamLeaderError: If the user doesn't lead the team
        TeamNotFoundError: If team doesn't exist
    """
    assert_leader_access(user, team_id)
    team = _get_team(team_id)

    member_ids = {str(mid) for mid in team.member_users().values_list('id', flat=True)}
    schedules = list(_past_schedules([team.id], today))
    slots = {
        (str(schedule.id), category)
        for schedule in schedules
        for category, _ in iter_slots(
            schedule, before=today, start_date=start_date, end_date=end_date
        )
    }

    present = absent = 0
    for schedule_id, category, member_id, record_type in (
        Attendance.objects
        .filter(schedule__in=schedules)
        .values_list('schedule_id', 'category', 'member_id', 'type')
    ):
        if (str(schedule_id), category) not in slots or str(member_id) not in member_ids:
            continue
        if record_type == AttendanceType.PRESENT:
            present += 1
        else:
            absent += 1

    recorded = present + absent
    expected = len(slots) * len(member_ids)

    return {
        'total_events': len(slots),
        'total_members': len(member_ids),
        'expected_records': expected,
        'total_attendance_records': recorded,
        'present_count': present,
        'absent_count': absent,
        'pending_count': max(0, expected - recorded),
        'attendance_rate': _percent(present, recorded),
        'completion_rate': _percent(recorded, expected),
    }


# =============================================================================
# Hierarchical sheets
# =============================================================================

def list_attendance_sheets_hierarchical(
    *,
    user: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[dict]:
    """
    Shelter -> team -> slot, with counts and the records of each slot.

    Admins get every team, leaders the teams they lead, anyone else
    nothing.
    """
    if user.role not in (UserRole.ADMIN, UserRole.LEADER):
        return []

    teams = list(_visible_leader_teams(user).annotate(member_count=Count('members')))
    if not teams:
        return []

    schedules_by_team = defaultdict(list)
    schedules = (
        ShelterSchedule.objects
        .filter(team__in=teams)
        .filter(_schedule_range_q(start_date, end_date))
        .select_related('team__shelter')
    )
    for schedule in schedules:
        schedules_by_team[schedule.team_id].append(schedule)

    records_by_slot = defaultdict(list)
    for record in (
        Attendance.objects
        .filter(schedule__in=schedules)
        .select_related('member')
        .order_by('member__name')
    ):
        records_by_slot[(record.schedule_id, record.category)].append(record)

    shelters: Dict[str, dict] = {}
    for team in teams:
        shelter = shelters.setdefault(str(team.shelter_id), {
            'shelter_id': team.shelter_id,
            'shelter_name': team.shelter.name,
            'total_teams': 0,
            'teams': [],
        })
        shelter['total_teams'] += 1

        team_schedules = schedules_by_team.get(team.id, [])
        slots = []
        for schedule in team_schedules:
            for category, day in iter_slots(schedule, start_date=start_date, end_date=end_date):
                records = records_by_slot.get((schedule.id, category), [])
                present = sum(1 for r in records if r.type == AttendanceType.PRESENT)
                slots.append({
                    'schedule_id': schedule.id,
                    'category': category,
                    'date': day,
                    'visit_number': schedule.visit_number,
                    'lesson_content': schedule.lesson_content,
                    'observation': schedule.observation,
                    'location': slot_location(schedule, category),
                    'total_members': team.member_count,
                    'present_count': present,
                    'absent_count': len(records) - present,
                    'pending_count': max(0, team.member_count - len(records)),
                    'attendance_records': records,
                })

        shelter['teams'].append({
            'team_id': team.id,
            'team_number': team.number,
            'team_name': team.display_name,
            'description': team.description,
            'total_schedules': len(team_schedules),
            'schedules': _sort_by_date_desc(slots),
        })

    return list(shelters.values())
