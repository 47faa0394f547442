import pytest
from django.urls import reverse
from rest_framework import status

from apps.schedules.models import ShelterSchedule, Event


@pytest.mark.django_db
class TestScheduleEndpoints:
    """Tests for /api/schedules/"""

    def test_leader_creates_schedule(self, leader_client, team):
        response = leader_client.post(reverse('schedules:schedule-list'), {
            'team_id': str(team.id),
            'visit_number': 1,
            'visit_date': '2024-05-11',
            'lesson_content': 'Creation',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['team_number'] == 1
        assert Event.objects.filter(schedule_id=response.data['id']).count() == 1

    def test_member_cannot_create(self, member_client, team):
        response = member_client.post(reverse('schedules:schedule-list'), {
            'team_id': str(team.id),
            'visit_number': 1,
            'lesson_content': 'Creation',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_leader_foreign_team(self, leader_client, other_team):
        response = leader_client.post(reverse('schedules:schedule-list'), {
            'team_id': str(other_team.id),
            'visit_number': 1,
            'lesson_content': 'Creation',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'error' in response.data

    def test_duplicate_conflict(self, admin_client, past_schedule):
        response = admin_client.post(reverse('schedules:schedule-list'), {
            'team_id': str(past_schedule.team_id),
            'visit_number': 1,
            'lesson_content': 'Again',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_member_lists_own_team(self, member_client, past_schedule):
        response = member_client.get(reverse('schedules:schedule-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [s['id'] for s in response.data['results']] == [str(past_schedule.id)]

    def test_malformed_team_filter(self, leader_client, past_schedule):
        response = leader_client.get(reverse('schedules:schedule-list'), {'team_id': 'not-a-uuid'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'team_id' in response.data

    def test_team_filter(self, admin_client, past_schedule, other_team):
        response = admin_client.get(reverse('schedules:schedule-list'), {'team_id': str(other_team.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_patch_clears_meeting(self, leader_client, past_schedule):
        url = reverse('schedules:schedule-detail', kwargs={'pk': past_schedule.id})
        response = leader_client.patch(url, {'meeting_date': None}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meeting_date'] is None

    def test_delete(self, admin_client, past_schedule):
        url = reverse('schedules:schedule-detail', kwargs={'pk': past_schedule.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ShelterSchedule.objects.exists()


@pytest.mark.django_db
class TestEventEndpoints:

    def test_admin_creates_event(self, admin_client):
        response = admin_client.post(reverse('schedules:event-list'), {
            'title': 'Christmas party',
            'date': '2024-12-20',
            'audience': 'leaders',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['event_type'] == 'custom'

    def test_leader_cannot_create_event(self, leader_client):
        response = leader_client.post(reverse('schedules:event-list'), {
            'title': 'x',
            'date': '2024-12-20',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_member_calendar_hides_leader_events(self, member_client):
        Event.objects.create(title='Leaders only', date='2024-12-20', audience='leaders')
        Event.objects.create(title='Open', date='2024-12-21', audience='all')

        response = member_client.get(reverse('schedules:event-list'))

        assert [e['title'] for e in response.data['results']] == ['Open']
