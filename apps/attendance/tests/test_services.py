"""
Service layer tests for the attendance app.

Tests cover:
- Registration (own and team) and upsert behaviour
- Pending detection per role
- Record listing, statistics and hierarchical sheets
"""

import pytest
from datetime import timedelta
from uuid import uuid4

from apps.attendance.models import Attendance, AttendanceCategory, AttendanceType
from apps.attendance.exceptions import (
    ScheduleNotFoundError,
    TeamNotFoundError,
    NotTeamLeaderError,
    NotTeamMemberError,
    ScheduleDateMissingError,
    ScheduleTeamMismatchError,
    MemberNotInTeamError,
    EmptyAttendanceListError,
)
from apps.attendance.services import (
    register_attendance,
    register_team_attendance,
    find_pendings_for_leader,
    find_pendings_for_member,
    find_all_pendings,
    list_team_members,
    list_team_schedules,
    list_leader_teams,
    list_leader_teams_with_members,
    list_attendance_records,
    get_attendance_stats,
    get_team_attendance_stats,
    list_attendance_sheets_hierarchical,
)
from apps.schedules.models import ShelterSchedule


# =============================================================================
# Registration
# =============================================================================

@pytest.mark.django_db
class TestRegisterAttendance:

    def test_member_registers_own_visit(self, member_user, past_schedule):
        attendance = register_attendance(
            user=member_user,
            schedule_id=past_schedule.id,
            type=AttendanceType.PRESENT,
        )

        assert attendance.member == member_user
        assert attendance.category == AttendanceCategory.VISIT
        assert attendance.comment is None

    def test_second_registration_replaces_first(self, member_user, past_schedule):
        register_attendance(user=member_user, schedule_id=past_schedule.id, type=AttendanceType.PRESENT)
        register_attendance(
            user=member_user,
            schedule_id=past_schedule.id,
            type=AttendanceType.ABSENT,
            comment='Sick',
        )

        records = Attendance.objects.filter(member=member_user, schedule=past_schedule)
        assert records.count() == 1
        assert records.get().type == AttendanceType.ABSENT
        assert records.get().comment == 'Sick'

    def test_visit_and_meeting_are_separate_records(self, member_user, past_schedule):
        register_attendance(user=member_user, schedule_id=past_schedule.id, type=AttendanceType.PRESENT)
        register_attendance(
            user=member_user,
            schedule_id=past_schedule.id,
            type=AttendanceType.ABSENT,
            category=AttendanceCategory.MEETING,
        )

        assert Attendance.objects.filter(member=member_user, schedule=past_schedule).count() == 2

    def test_unknown_schedule(self, member_user):
        with pytest.raises(ScheduleNotFoundError):
            register_attendance(user=member_user, schedule_id=uuid4(), type=AttendanceType.PRESENT)

    def test_slot_without_date(self, member_user, future_schedule):
        with pytest.raises(ScheduleDateMissingError):
            register_attendance(
                user=member_user,
                schedule_id=future_schedule.id,
                type=AttendanceType.PRESENT,
                category=AttendanceCategory.MEETING,
            )

    def test_outsider_cannot_register(self, other_member, past_schedule):
        with pytest.raises(NotTeamMemberError):
            register_attendance(user=other_member, schedule_id=past_schedule.id, type=AttendanceType.PRESENT)

    def test_leader_of_team_can_register_own(self, leader_user, past_schedule):
        attendance = register_attendance(
            user=leader_user,
            schedule_id=past_schedule.id,
            type=AttendanceType.PRESENT,
        )

        assert attendance.member == leader_user


@pytest.mark.django_db
class TestRegisterTeamAttendance:

    def test_leader_registers_members(self, leader_user, member_user, team, past_schedule):
        results = register_team_attendance(
            user=leader_user,
            team_id=team.id,
            schedule_id=past_schedule.id,
            attendances=[{'member_id': member_user.id, 'type': AttendanceType.PRESENT}],
        )

        assert len(results) == 1
        assert results[0].member_id == member_user.id

    def test_empty_list_rejected(self, leader_user, team, past_schedule):
        with pytest.raises(EmptyAttendanceListError):
            register_team_attendance(
                user=leader_user, team_id=team.id, schedule_id=past_schedule.id, attendances=[]
            )

    def test_non_leader_rejected(self, member_user, team, past_schedule):
        with pytest.raises(NotTeamLeaderError):
            register_team_attendance(
                user=member_user,
                team_id=team.id,
                schedule_id=past_schedule.id,
                attendances=[{'member_id': member_user.id, 'type': AttendanceType.PRESENT}],
            )

    def test_schedule_of_other_team(self, admin_user, other_team, past_schedule, other_member):
        with pytest.raises(ScheduleTeamMismatchError):
            register_team_attendance(
                user=admin_user,
                team_id=other_team.id,
                schedule_id=past_schedule.id,
                attendances=[{'member_id': other_member.id, 'type': AttendanceType.PRESENT}],
            )

    def test_one_bad_member_rolls_back_batch(
        self, leader_user, member_user, other_member, team, past_schedule
    ):
        with pytest.raises(MemberNotInTeamError):
            register_team_attendance(
                user=leader_user,
                team_id=team.id,
                schedule_id=past_schedule.id,
                attendances=[
                    {'member_id': member_user.id, 'type': AttendanceType.PRESENT},
                    {'member_id': other_member.id, 'type': AttendanceType.PRESENT},
                ],
            )

        assert not Attendance.objects.exists()


# =============================================================================
# Pendings
# =============================================================================

@pytest.mark.django_db
class TestPendings:

    def test_leader_sees_both_past_slots(self, leader_user, member_user, team, past_schedule, today):
        pendings = find_pendings_for_leader(user=leader_user, team_id=team.id, today=today)

        assert [p['category'] for p in pendings] == ['visit', 'meeting']
        assert pendings[0]['pending_members'][0]['member_id'] == member_user.id
        assert pendings[0]['location'] == 'Shelter - Casa Esperanca'
        assert pendings[1]['location'] == 'Meeting - Room 3'

    def test_recorded_slot_drops_out(self, leader_user, member_user, team, past_schedule, today):
        Attendance.objects.create(
            member=member_user,
            schedule=past_schedule,
            type=AttendanceType.PRESENT,
            category=AttendanceCategory.VISIT,
        )

        pendings = find_pendings_for_leader(user=leader_user, team_id=team.id, today=today)

        assert [p['category'] for p in pendings] == ['meeting']

    def test_future_and_today_slots_are_not_pending(self, member_user, team, today):
        ShelterSchedule.objects.create(
            team=team, visit_number=5, visit_date=today, lesson_content='Today'
        )
        ShelterSchedule.objects.create(
            team=team, visit_number=6, visit_date=today + timedelta(days=1), lesson_content='Tomorrow'
        )

        assert find_pendings_for_member(user=member_user, today=today) == []

    def test_leader_cannot_see_foreign_team(self, leader_user, other_team, today):
        with pytest.raises(NotTeamLeaderError):
            find_pendings_for_leader(user=leader_user, team_id=other_team.id, today=today)

    def test_unknown_team(self, admin_user, today):
        with pytest.raises(TeamNotFoundError):
            find_pendings_for_leader(user=admin_user, team_id=uuid4(), today=today)

    def test_member_pendings(self, member_user, past_schedule, today):
        pendings = find_pendings_for_member(user=member_user, today=today)

        assert len(pendings) == 2
        assert pendings[0]['team_number'] == 1

    def test_all_pendings_admin(self, admin_user, past_schedule, today):
        result = find_all_pendings(user=admin_user, today=today)

        assert result['role'] == 'admin'
        assert result['my_pendings'] == []
        assert result['total_pending'] == 2

    def test_all_pendings_member(self, member_user, past_schedule, today):
        result = find_all_pendings(user=member_user, today=today)

        assert result['team_pendings'] == []
        assert result['total_pending'] == 2


# =============================================================================
# Teams and schedules
# =============================================================================

@pytest.mark.django_db
class TestTeamReads:

    def test_team_members(self, leader_user, member_user, team):
        result = list_team_members(user=leader_user, team_id=team.id)

        assert result['team_number'] == 1
        assert [m['email'] for m in result['members']] == [member_user.email]

    def test_team_schedules_one_row_per_slot(self, member_user, team, past_schedule, future_schedule):
        rows = list_team_schedules(user=member_user, team_id=team.id)

        assert len(rows) == 3
        assert rows[0]['visit_number'] == 2

    def test_team_schedules_date_range(self, member_user, team, past_schedule, future_schedule, today):
        rows = list_team_schedules(
            user=member_user,
            team_id=team.id,
            start_date=today - timedelta(days=8),
            end_date=today,
            sort_order='asc',
        )

        assert [(r['visit_number'], r['category']) for r in rows] == [(1, 'visit')]

    def test_team_schedules_outsider(self, other_member, team):
        with pytest.raises(NotTeamMemberError):
            list_team_schedules(user=other_member, team_id=team.id)

    def test_leader_teams(self, leader_user, team, other_team):
        teams = list_leader_teams(user=leader_user)

        assert [t['team_id'] for t in teams] == [team.id]
        assert teams[0]['member_count'] == 1

    def test_admin_sees_every_team_grouped(self, admin_user, team, other_team):
        shelters = list_leader_teams_with_members(user=admin_user)

        assert len(shelters) == 1
        assert [t['team_number'] for t in shelters[0]['teams']] == [1, 2]


# =============================================================================
# Records and statistics
# =============================================================================

@pytest.fixture
def recorded(member_user, past_schedule):
    Attendance.objects.create(
        member=member_user,
        schedule=past_schedule,
        type=AttendanceType.PRESENT,
        category=AttendanceCategory.VISIT,
    )
    return Attendance.objects.create(
        member=member_user,
        schedule=past_schedule,
        type=AttendanceType.ABSENT,
        category=AttendanceCategory.MEETING,
        comment='Traffic',
    )


@pytest.mark.django_db
class TestRecords:

    def test_paginates(self, admin_user, recorded):
        page = list_attendance_records(user=admin_user, limit=1)

        assert len(page['results']) == 1
        assert page['meta']['total'] == 2
        assert page['meta']['total_pages'] == 2
        assert page['meta']['has_next'] is True
        assert page['meta']['has_prev'] is False

    def test_filters_by_type(self, admin_user, recorded):
        page = list_attendance_records(user=admin_user, type=AttendanceType.ABSENT)

        assert [r.comment for r in page['results']] == ['Traffic']

    def test_date_range_uses_slot_date(self, admin_user, recorded, today):
        page = list_attendance_records(
            user=admin_user,
            start_date=today - timedelta(days=8),
            end_date=today,
        )

        assert [r.category for r in page['results']] == ['visit']

    def test_outsider_sees_nothing(self, other_member, recorded):
        page = list_attendance_records(user=other_member)

        assert page['results'] == []
        assert page['meta']['total'] == 0


@pytest.mark.django_db
class TestStats:

    def test_member_stats(self, member_user, recorded, future_schedule, today):
        stats = get_attendance_stats(user=member_user, today=today)

        assert stats['total_events'] == 1
        assert stats['total_attendance_records'] == 2
        assert stats['present_count'] == 1
        assert stats['absent_count'] == 1
        assert stats['attendance_rate'] == 50
        assert stats['pending_count'] == 0

    def test_member_stats_counts_missing_slots(self, member_user, past_schedule, today):
        stats = get_attendance_stats(user=member_user, today=today)

        assert stats['total_attendance_records'] == 0
        assert stats['attendance_rate'] == 0
        assert stats['pending_count'] == 2

    def test_team_stats(self, leader_user, team, recorded, future_schedule, today):
        stats = get_team_attendance_stats(user=leader_user, team_id=team.id, today=today)

        assert stats['total_events'] == 2
        assert stats['total_members'] == 1
        assert stats['expected_records'] == 2
        assert stats['pending_count'] == 0
        assert stats['attendance_rate'] == 50
        assert stats['completion_rate'] == 100

    def test_team_stats_foreign_leader(self, leader_user, other_team, today):
        with pytest.raises(NotTeamLeaderError):
            get_team_attendance_stats(user=leader_user, team_id=other_team.id, today=today)


@pytest.mark.django_db
class TestSheets:

    def test_leader_sheet(self, leader_user, team, recorded, future_schedule):
        shelters = list_attendance_sheets_hierarchical(user=leader_user)

        assert len(shelters) == 1
        team_sheet = shelters[0]['teams'][0]
        assert team_sheet['total_schedules'] == 2
        assert len(team_sheet['schedules']) == 3

        visit = next(
            slot for slot in team_sheet['schedules']
            if slot['visit_number'] == 1 and slot['category'] == 'visit'
        )
        assert visit['present_count'] == 1
        assert visit['pending_count'] == 0

    def test_member_gets_nothing(self, member_user, recorded):
        assert list_attendance_sheets_hierarchical(user=member_user) == []
