import pytest
from datetime import date, timedelta
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.shelters.models import Shelter, Team, LeaderProfile, MemberProfile
from apps.schedules.models import ShelterSchedule


def authenticate(user):
    """Return a fresh API client carrying a JWT for the user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def leader_user(db):
    """Leader with an (empty) leader profile."""
    user = User.objects.create_user(
        email='leader@example.com',
        password='TestPass123!',
        name='Lara Leader',
        phone='+5511999990001',
        role=UserRole.LEADER,
    )
    LeaderProfile.objects.create(user=user)
    return user


@pytest.fixture
def member_user(db):
    """Member with a profile, not yet on a team."""
    user = User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        name='Maria Member',
        phone='+5511999990002',
        role=UserRole.MEMBER,
    )
    MemberProfile.objects.create(user=user)
    return user


@pytest.fixture
def other_member(db):
    user = User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        name='Otto Other',
        role=UserRole.MEMBER,
    )
    MemberProfile.objects.create(user=user)
    return user


@pytest.fixture
def admin_client(admin_user):
    return authenticate(admin_user)


@pytest.fixture
def leader_client(leader_user):
    return authenticate(leader_user)


@pytest.fixture
def member_client(member_user):
    return authenticate(member_user)


@pytest.fixture
def other_client(other_member):
    return authenticate(other_member)


@pytest.fixture
def shelter(db):
    return Shelter.objects.create(
        name='Casa Esperanca',
        description='Children shelter',
        teams_quantity=2,
        street='Rua das Flores',
        number='120',
        city='Sao Paulo',
        state='SP',
    )


@pytest.fixture
def team(shelter, leader_user, member_user):
    """Team 1 of the shelter, led by leader_user with member_user on it."""
    team = Team.objects.create(shelter=shelter, number=1)
    leader_user.leader_profile.teams.add(team)
    member_user.member_profile.team = team
    member_user.member_profile.save()
    return team


@pytest.fixture
def other_team(shelter, other_member):
    """Team 2 of the shelter, no leader, other_member on it."""
    team = Team.objects.create(shelter=shelter, number=2)
    other_member.member_profile.team = team
    other_member.member_profile.save()
    return team


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def past_schedule(team, today):
    """Schedule whose visit and meeting are both over."""
    return ShelterSchedule.objects.create(
        team=team,
        visit_number=1,
        visit_date=today - timedelta(days=7),
        meeting_date=today - timedelta(days=10),
        lesson_content='The good shepherd',
        meeting_room='Room 3',
    )


@pytest.fixture
def future_schedule(team, today):
    return ShelterSchedule.objects.create(
        team=team,
        visit_number=2,
        visit_date=today + timedelta(days=7),
        lesson_content='Noah and the ark',
    )
