"""
Shelters app services layer.

Shelters own numbered teams; leader and member profiles attach users to them.
"""

from .exceptions import (
    SheltersServiceError,
    ShelterNotFoundError,
    TeamNotFoundError,
    DuplicateTeamError,
    ProfileNotFoundError,
)

from .shelter_management import (
    create_shelter,
    update_shelter,
    delete_shelter,
    get_shelter_by_id,
)

from .team_management import (
    create_team,
    update_team,
    delete_team,
    get_team_by_id,
    get_teams_for_user,
)

from .team_assignment import (
    assign_leader_to_team,
    remove_leader_from_team,
    assign_member_to_team,
    unassign_member,
    get_leader_shelters,
)

__all__ = [
    # Exceptions
    'SheltersServiceError',
    'ShelterNotFoundError',
    'TeamNotFoundError',
    'DuplicateTeamError',
    'ProfileNotFoundError',
    # Shelters
    'create_shelter',
    'update_shelter',
    'delete_shelter',
    'get_shelter_by_id',
    # Teams
    'create_team',
    'update_team',
    'delete_team',
    'get_team_by_id',
    'get_teams_for_user',
    # Assignment
    'assign_leader_to_team',
    'remove_leader_from_team',
    'assign_member_to_team',
    'unassign_member',
    'get_leader_shelters',
]
