"""
Team access checks for attendance.

Admins pass every check. Leaders reach the teams they lead, members the
team they belong to.
"""

from typing import List
from uuid import UUID

from apps.accounts.models import User, UserRole
from apps.shelters.models import Team

from ..exceptions import NotTeamLeaderError, NotTeamMemberError


def get_leader_team_ids(user: User) -> List[UUID]:
    return list(
        Team.objects.filter(leaders__user=user).values_list('id', flat=True).distinct()
    )


def get_member_team_ids(user: User) -> List[UUID]:
    return list(Team.objects.filter(members__user=user).values_list('id', flat=True))


def get_user_team_ids(user: User) -> List[UUID]:
    """Teams the user leads or belongs to."""
    team_ids = get_member_team_ids(user)
    team_ids.extend(tid for tid in get_leader_team_ids(user) if tid not in team_ids)
    return team_ids


def _same_team(team_ids, team_id) -> bool:
    return str(team_id) in {str(tid) for tid in team_ids}


def assert_leader_access(user: User, team_id: UUID) -> None:
    """
    Raises:
        NotTeamLeaderError: If a non-admin does not lead the team
    """
    if user.role == UserRole.ADMIN:
        return
    if not _same_team(get_leader_team_ids(user), team_id):
        raise NotTeamLeaderError()


def assert_team_membership(user: User, team_id: UUID) -> None:
    """
    Raises:
        NotTeamMemberError: If a non-admin neither leads nor belongs to the team
    """
    if user.role == UserRole.ADMIN:
        return
    if not _same_team(get_user_team_ids(user), team_id):
        raise NotTeamMemberError()
