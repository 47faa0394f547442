"""Team management service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User, UserRole
from apps.shelters.models import Shelter, Team

from .exceptions import (
    ShelterNotFoundError,
    TeamNotFoundError,
    DuplicateTeamError,
)

logger = logging.getLogger(__name__)


def get_team_by_id(*, team_id: UUID) -> Team:
    try:
        return Team.objects.select_related('shelter').get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")


@transaction.atomic
def create_team(*, shelter_id: UUID, number: int, description: str = "") -> Team:
    """
    Create a numbered team in a shelter.

    Raises:
        ShelterNotFoundError: If shelter doesn't exist
        DuplicateTeamError: If the shelter already has this team number
    """
    try:
        shelter = Shelter.objects.select_for_update().get(id=shelter_id)
    except Shelter.DoesNotExist:
        raise ShelterNotFoundError(f"Shelter with ID {shelter_id} not found")

    if Team.objects.filter(shelter=shelter, number=number).exists():
        raise DuplicateTeamError(f"Shelter {shelter.name} already has team {number}")

    try:
        team = Team.objects.create(shelter=shelter, number=number, description=description)
    except IntegrityError:
        raise DuplicateTeamError(f"Shelter {shelter.name} already has team {number}")

    logger.info("Created team %s (number %d) in shelter %s", team.id, number, shelter.id)
    return team


@transaction.atomic
def update_team(
    *,
    team_id: UUID,
    number: Optional[int] = None,
    description: Optional[str] = None,
) -> Team:
    """
    Renumber or describe a team.

    Raises:
        TeamNotFoundError: If team doesn't exist
        DuplicateTeamError: If the new number is taken in the shelter
    """
    try:
        team = Team.objects.select_for_update().select_related('shelter').get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")

    update_fields = []
    if number is not None and number != team.number:
        if Team.objects.filter(shelter_id=team.shelter_id, number=number).exists():
            raise DuplicateTeamError(f"Shelter {team.shelter.name} already has team {number}")
        team.number = number
        update_fields.append('number')
    if description is not None:
        team.description = description
        update_fields.append('description')

    if update_fields:
        update_fields.append('updated_at')
        team.save(update_fields=update_fields)
    return team


@transaction.atomic
def delete_team(*, team_id: UUID) -> None:
    deleted, _ = Team.objects.filter(id=team_id).delete()
    if not deleted:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")
    logger.info("Deleted team %s", team_id)


def get_teams_for_user(*, user: User) -> QuerySet:
    """
    Teams visible to the user.

    Admins see every team, leaders the teams they lead and members
    their own team.
    """
    queryset = Team.objects.select_related('shelter')
    if user.role == UserRole.ADMIN:
        return queryset.all()
    if user.role == UserRole.LEADER:
        return queryset.filter(leaders__user=user).distinct()
    return queryset.filter(members__user=user)
