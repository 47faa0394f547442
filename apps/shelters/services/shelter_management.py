"""
Shelter management service.

Creating or growing a shelter keeps its numbered teams in step with
teams_quantity. Shrinking never deletes teams.
"""

import logging
from uuid import UUID

from django.db import transaction

from apps.shelters.models import Shelter, Team

from .exceptions import ShelterNotFoundError

logger = logging.getLogger(__name__)

SHELTER_FIELDS = (
    'name', 'description', 'teams_quantity',
    'street', 'number', 'district', 'city', 'state', 'postal_code', 'complement',
)


def _ensure_teams(shelter: Shelter) -> int:
    existing = set(shelter.teams.values_list('number', flat=True))
    missing = [
        Team(shelter=shelter, number=number)
        for number in range(1, shelter.teams_quantity + 1)
        if number not in existing
    ]
    Team.objects.bulk_create(missing)
    return len(missing)


def get_shelter_by_id(*, shelter_id: UUID) -> Shelter:
    try:
        return Shelter.objects.get(id=shelter_id)
    except Shelter.DoesNotExist:
        raise ShelterNotFoundError(f"Shelter with ID {shelter_id} not found")


@transaction.atomic
def create_shelter(*, name: str, teams_quantity: int = 1, **fields) -> Shelter:
    """
    Create a shelter and its teams numbered 1..teams_quantity.

    Args:
        name: Shelter name
        teams_quantity: Number of teams to create
        **fields: Optional description and address fields

    Returns:
        Created Shelter instance
    """
    extra = {key: value for key, value in fields.items() if key in SHELTER_FIELDS}
    shelter = Shelter.objects.create(name=name, teams_quantity=teams_quantity, **extra)
    created = _ensure_teams(shelter)

    logger.info("Created shelter %s with %d teams", shelter.id, created)
    return shelter


@transaction.atomic
def update_shelter(*, shelter_id: UUID, **fields) -> Shelter:
    """
    Update shelter fields.

    Raising teams_quantity creates the missing numbered teams.

    Raises:
        ShelterNotFoundError: If shelter doesn't exist
    """
    try:
        shelter = Shelter.objects.select_for_update().get(id=shelter_id)
    except Shelter.DoesNotExist:
        raise ShelterNotFoundError(f"Shelter with ID {shelter_id} not found")

    update_fields = []
    for key, value in fields.items():
        if key in SHELTER_FIELDS:
            setattr(shelter, key, value)
            update_fields.append(key)

    if update_fields:
        update_fields.append('updated_at')
        shelter.save(update_fields=update_fields)

    if 'teams_quantity' in fields:
        created = _ensure_teams(shelter)
        if created:
            logger.info("Added %d teams to shelter %s", created, shelter.id)

    return shelter


@transaction.atomic
def delete_shelter(*, shelter_id: UUID) -> None:
    """Delete a shelter together with its teams."""
    deleted, _ = Shelter.objects.filter(id=shelter_id).delete()
    if not deleted:
        raise ShelterNotFoundError(f"Shelter with ID {shelter_id} not found")
    logger.info("Deleted shelter %s", shelter_id)
