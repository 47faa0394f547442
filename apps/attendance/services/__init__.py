"""
Attendance app services layer.

access: who may read or write a team's attendance
writer: individual and batch registration
reader: pendings, listings and statistics
"""

from .access import (
    get_leader_team_ids,
    get_member_team_ids,
    get_user_team_ids,
    assert_leader_access,
    assert_team_membership,
)

from .writer import (
    register_attendance,
    register_team_attendance,
)

from .reader import (
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

__all__ = [
    # Access
    'get_leader_team_ids',
    'get_member_team_ids',
    'get_user_team_ids',
    'assert_leader_access',
    'assert_team_membership',
    # Writer
    'register_attendance',
    'register_team_attendance',
    # Reader
    'find_pendings_for_leader',
    'find_pendings_for_member',
    'find_all_pendings',
    'list_team_members',
    'list_team_schedules',
    'list_leader_teams',
    'list_leader_teams_with_members',
    'list_attendance_records',
    'get_attendance_stats',
    'get_team_attendance_stats',
    'list_attendance_sheets_hierarchical',
]
