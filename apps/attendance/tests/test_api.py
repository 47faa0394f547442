import pytest
from django.urls import reverse
from rest_framework import status

from apps.attendance.models import Attendance, AttendanceType


@pytest.mark.django_db
class TestRegisterEndpoints:
    """Tests for POST /api/attendance/register/ and /register/team/"""

    def test_register_own(self, member_client, past_schedule):
        url = reverse('attendance:register')
        response = member_client.post(url, {
            'schedule_id': str(past_schedule.id),
            'type': 'present',
            'category': 'meeting',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category'] == 'meeting'
        assert response.data['shelter_name'] == 'Casa Esperanca'

    def test_register_unknown_schedule(self, member_client):
        url = reverse('attendance:register')
        response = member_client.post(url, {
            'schedule_id': '00000000-0000-0000-0000-000000000000',
            'type': 'present',
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_register_invalid_type(self, member_client, past_schedule):
        url = reverse('attendance:register')
        response = member_client.post(url, {
            'schedule_id': str(past_schedule.id),
            'type': 'late',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_outsider_forbidden(self, other_client, past_schedule):
        url = reverse('attendance:register')
        response = other_client.post(url, {
            'schedule_id': str(past_schedule.id),
            'type': 'present',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_register_unauthenticated(self, api_client, past_schedule):
        url = reverse('attendance:register')
        response = api_client.post(url, {'schedule_id': str(past_schedule.id), 'type': 'present'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_register_team(self, leader_client, team, member_user, past_schedule):
        url = reverse('attendance:register-team')
        response = leader_client.post(url, {
            'team_id': str(team.id),
            'schedule_id': str(past_schedule.id),
            'attendances': [
                {'member_id': str(member_user.id), 'type': 'absent', 'comment': 'Travelling'},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 1
        assert Attendance.objects.get(member=member_user).comment == 'Travelling'

    def test_register_team_empty_list(self, leader_client, team, past_schedule):
        url = reverse('attendance:register-team')
        response = leader_client.post(url, {
            'team_id': str(team.id),
            'schedule_id': str(past_schedule.id),
            'attendances': [],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_team_member_forbidden(self, member_client, team, member_user, past_schedule):
        url = reverse('attendance:register-team')
        response = member_client.post(url, {
            'team_id': str(team.id),
            'schedule_id': str(past_schedule.id),
            'attendances': [{'member_id': str(member_user.id), 'type': 'present'}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestPendingEndpoints:

    def test_pending_all_leader(self, leader_client, past_schedule):
        response = leader_client.get(reverse('attendance:pending-all'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'leader'
        assert len(response.data['team_pendings']) == 2
        assert response.data['total_pending'] == 2

    def test_pending_member(self, member_client, past_schedule):
        response = member_client.get(reverse('attendance:pending-member'))

        assert response.status_code == status.HTTP_200_OK
        assert {row['category'] for row in response.data} == {'visit', 'meeting'}

    def test_pending_team_foreign_leader(self, leader_client, other_team):
        url = reverse('attendance:pending-leader', kwargs={'team_id': other_team.id})
        response = leader_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestTeamEndpoints:

    def test_team_members(self, leader_client, team, member_user):
        url = reverse('attendance:team-members', kwargs={'team_id': team.id})
        response = leader_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['members'][0]['email'] == member_user.email

    def test_team_schedules_rejects_bad_range(self, member_client, team):
        url = reverse('attendance:team-schedules', kwargs={'team_id': team.id})
        response = member_client.get(url, {'start_date': '2024-05-10', 'end_date': '2024-05-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_team_schedules(self, member_client, team, past_schedule):
        url = reverse('attendance:team-schedules', kwargs={'team_id': team.id})
        response = member_client.get(url, {'sort_order': 'asc'})

        assert response.status_code == status.HTTP_200_OK
        assert [row['category'] for row in response.data] == ['meeting', 'visit']

    def test_leader_teams_member_forbidden(self, member_client):
        response = member_client.get(reverse('attendance:leader-teams'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_leader_teams_members(self, leader_client, team):
        response = leader_client.get(reverse('attendance:leader-teams-members'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['shelter_name'] == 'Casa Esperanca'
        assert len(response.data[0]['teams'][0]['members']) == 1


@pytest.mark.django_db
class TestRecordEndpoints:

    @pytest.fixture
    def record(self, member_user, past_schedule):
        return Attendance.objects.create(
            member=member_user,
            schedule=past_schedule,
            type=AttendanceType.PRESENT,
        )

    def test_records(self, leader_client, record):
        response = leader_client.get(reverse('attendance:records'), {'limit': 10})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meta']['total'] == 1
        assert response.data['results'][0]['id'] == str(record.id)

    def test_records_limit_capped(self, leader_client):
        response = leader_client.get(reverse('attendance:records'), {'limit': 500})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_stats(self, member_client, record):
        response = member_client.get(reverse('attendance:stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['present_count'] == 1
        assert response.data['pending_count'] == 1

    def test_team_stats(self, leader_client, team, record):
        url = reverse('attendance:team-stats', kwargs={'team_id': team.id})
        response = leader_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['expected_records'] == 2
        assert response.data['completion_rate'] == 50

    def test_sheets(self, admin_client, record):
        response = admin_client.get(reverse('attendance:sheets-hierarchical'))

        assert response.status_code == status.HTTP_200_OK
        slots = response.data[0]['teams'][0]['schedules']
        visit = next(slot for slot in slots if slot['category'] == 'visit')
        assert visit['attendance_records'][0]['member_name'] == 'Maria Member'
