"""
Team assignment service.

Leaders may lead several teams across shelters. A member belongs to at
most one team, so assigning moves them.
"""

import logging
from uuid import UUID

from django.db import transaction

from apps.shelters.models import Shelter, Team, LeaderProfile, MemberProfile

from .exceptions import (
    ShelterNotFoundError,
    TeamNotFoundError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)


def _get_or_create_team(shelter_id: UUID, team_number: int) -> Team:
    try:
        shelter = Shelter.objects.select_for_update().get(id=shelter_id)
    except Shelter.DoesNotExist:
        raise ShelterNotFoundError(f"Shelter with ID {shelter_id} not found")

    team, created = Team.objects.get_or_create(shelter=shelter, number=team_number)
    if created:
        logger.info("Created team %d in shelter %s on assignment", team_number, shelter.id)
        if team_number > shelter.teams_quantity:
            shelter.teams_quantity = team_number
            shelter.save(update_fields=['teams_quantity', 'updated_at'])
    return team


@transaction.atomic
def assign_leader_to_team(
    *,
    leader_profile_id: UUID,
    shelter_id: UUID,
    team_number: int,
) -> LeaderProfile:
    """
    Link a leader to the shelter's team with this number.

    The team is created when the shelter has none with that number.
    Linking twice is a no-op.

    Raises:
        ProfileNotFoundError: If leader profile doesn't exist
        ShelterNotFoundError: If shelter doesn't exist
    """
    try:
        leader = LeaderProfile.objects.select_related('user').get(id=leader_profile_id)
    except LeaderProfile.DoesNotExist:
        raise ProfileNotFoundError(f"Leader profile with ID {leader_profile_id} not found")

    team = _get_or_create_team(shelter_id, team_number)
    leader.teams.add(team)

    logger.info("Leader %s assigned to team %s", leader.id, team.id)
    return leader


@transaction.atomic
def remove_leader_from_team(*, leader_profile_id: UUID, team_id: UUID) -> LeaderProfile:
    try:
        leader = LeaderProfile.objects.get(id=leader_profile_id)
    except LeaderProfile.DoesNotExist:
        raise ProfileNotFoundError(f"Leader profile with ID {leader_profile_id} not found")

    if not Team.objects.filter(id=team_id).exists():
        raise TeamNotFoundError(f"Team with ID {team_id} not found")

    leader.teams.remove(team_id)
    logger.info("Leader %s removed from team %s", leader.id, team_id)
    return leader


@transaction.atomic
def assign_member_to_team(
    *,
    member_profile_id: UUID,
    shelter_id: UUID,
    team_number: int,
) -> MemberProfile:
    """
    Put a member on the shelter's team with this number.

    Any previous team assignment is replaced.

    Raises:
        ProfileNotFoundError: If member profile doesn't exist
        ShelterNotFoundError: If shelter doesn't exist
    """
    try:
        member = MemberProfile.objects.select_for_update().get(id=member_profile_id)
    except MemberProfile.DoesNotExist:
        raise ProfileNotFoundError(f"Member profile with ID {member_profile_id} not found")

    team = _get_or_create_team(shelter_id, team_number)
    previous_team_id = member.team_id
    member.team = team
    member.save(update_fields=['team', 'updated_at'])

    logger.info("Member %s moved from team %s to %s", member.id, previous_team_id, team.id)
    return member


@transaction.atomic
def unassign_member(*, member_profile_id: UUID) -> MemberProfile:
    try:
        member = MemberProfile.objects.select_for_update().get(id=member_profile_id)
    except MemberProfile.DoesNotExist:
        raise ProfileNotFoundError(f"Member profile with ID {member_profile_id} not found")

    member.team = None
    member.save(update_fields=['team', 'updated_at'])
    return member


def get_leader_shelters(*, user) -> list:
    """
    Shelters where the user leads at least one team, with every team of
    each shelter flagged by whether the user leads it.
    """
    try:
        leader = LeaderProfile.objects.get(user=user)
    except LeaderProfile.DoesNotExist:
        raise ProfileNotFoundError("Leader profile not found")

    led_team_ids = set(leader.teams.values_list('id', flat=True))
    shelters = (
        Shelter.objects
        .filter(teams__id__in=led_team_ids)
        .distinct()
        .prefetch_related('teams')
        .order_by('name')
    )

    return [
        {
            'shelter': shelter,
            'teams': [
                {'team': team, 'is_leader': team.id in led_team_ids}
                for team in sorted(shelter.teams.all(), key=lambda t: t.number)
            ],
        }
        for shelter in shelters
    ]
