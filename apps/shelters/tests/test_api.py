import pytest
from django.urls import reverse
from rest_framework import status

from apps.shelters.models import Shelter, Team


@pytest.mark.django_db
class TestShelterEndpoints:
    """Tests for /api/shelters/"""

    def test_list_any_authenticated(self, member_client, shelter):
        response = member_client.get(reverse('shelters:shelter-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'][0]['name'] == 'Casa Esperanca'

    def test_search(self, member_client, shelter):
        response = member_client.get(reverse('shelters:shelter-list'), {'search': 'paulo'})

        assert len(response.data['results']) == 1

    def test_list_unauthenticated(self, api_client, shelter):
        response = api_client.get(reverse('shelters:shelter-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_admin(self, admin_client):
        response = admin_client.post(reverse('shelters:shelter-list'), {
            'name': 'Lar Feliz',
            'teams_quantity': 2,
            'street': 'Av. Brasil',
            'city': 'Campinas',
            'state': 'SP',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data['teams']) == 2
        assert response.data['address'] == 'Av. Brasil, s/n - Campinas, SP'

    def test_create_forbidden_for_leader(self, leader_client):
        response = leader_client.post(reverse('shelters:shelter-list'), {'name': 'X'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_partial_update(self, admin_client, shelter):
        url = reverse('shelters:shelter-detail', kwargs={'pk': shelter.id})
        response = admin_client.patch(url, {'description': 'Updated'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        shelter.refresh_from_db()
        assert shelter.description == 'Updated'
        assert shelter.teams_quantity == 2

    def test_shelter_teams(self, member_client, team, other_team):
        url = reverse('shelters:shelter-teams', kwargs={'pk': team.shelter_id})
        response = member_client.get(url)

        assert [t['number'] for t in response.data] == [1, 2]

    def test_delete(self, admin_client, shelter):
        url = reverse('shelters:shelter-detail', kwargs={'pk': shelter.id})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Shelter.objects.exists()


@pytest.mark.django_db
class TestTeamEndpoints:

    def test_create_duplicate_conflict(self, admin_client, team):
        response = admin_client.post(reverse('shelters:team-list'), {
            'shelter_id': str(team.shelter_id),
            'number': 1,
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_member_sees_own_team(self, member_client, team, other_team):
        response = member_client.get(reverse('shelters:team-list'))

        assert [t['id'] for t in response.data] == [str(team.id)]

    def test_malformed_shelter_filter(self, member_client, team):
        response = member_client.get(reverse('shelters:team-list'), {'shelter_id': 'nope'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'shelter_id' in response.data


@pytest.mark.django_db
class TestAssignmentEndpoints:

    def test_admin_assigns_leader(self, admin_client, leader_user, shelter):
        url = reverse('shelters:leader-assign-team', kwargs={'pk': leader_user.leader_profile.id})
        response = admin_client.post(url, {'shelter_id': str(shelter.id), 'team_number': 2}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [t['number'] for t in response.data['teams']] == [2]

    def test_leader_cannot_assign_leader(self, leader_client, leader_user, shelter):
        url = reverse('shelters:leader-assign-team', kwargs={'pk': leader_user.leader_profile.id})
        response = leader_client.post(url, {'shelter_id': str(shelter.id), 'team_number': 2}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_leader_assigns_member_to_led_team(self, leader_client, team, other_member):
        url = reverse('shelters:member-assign-team', kwargs={'pk': other_member.member_profile.id})
        response = leader_client.post(url, {'shelter_id': str(team.shelter_id), 'team_number': 1}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['team']['id'] == str(team.id)

    def test_leader_cannot_assign_into_foreign_team(self, leader_client, team, other_member):
        url = reverse('shelters:member-assign-team', kwargs={'pk': other_member.member_profile.id})
        response = leader_client.post(url, {'shelter_id': str(team.shelter_id), 'team_number': 3}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Team.objects.filter(number=3).exists()

    def test_leader_cannot_take_member_from_another_team(self, leader_client, team, other_team, other_member):
        url = reverse('shelters:member-assign-team', kwargs={'pk': other_member.member_profile.id})
        response = leader_client.post(url, {'shelter_id': str(team.shelter_id), 'team_number': 1}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        other_member.member_profile.refresh_from_db()
        assert other_member.member_profile.team_id == other_team.id

    def test_admin_moves_member_between_teams(self, admin_client, team, other_team, other_member):
        url = reverse('shelters:member-assign-team', kwargs={'pk': other_member.member_profile.id})
        response = admin_client.post(url, {'shelter_id': str(team.shelter_id), 'team_number': 1}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['team']['id'] == str(team.id)

    def test_malformed_member_team_filter(self, leader_client, team):
        response = leader_client.get(reverse('shelters:member-list'), {'team_id': 'not-a-uuid'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_my_shelters(self, leader_client, team):
        response = leader_client.get(reverse('shelters:my-shelters'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['shelter']['name'] == 'Casa Esperanca'

    def test_my_shelters_member_forbidden(self, member_client):
        response = member_client.get(reverse('shelters:my-shelters'))

        assert response.status_code == status.HTTP_403_FORBIDDEN
