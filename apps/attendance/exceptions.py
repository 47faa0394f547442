"""
Domain exceptions for the attendance app.

Each carries the HTTP status the API answers with.
"""
from rest_framework.exceptions import APIException


class AttendanceServiceError(APIException):
    """Base exception for attendance service errors."""
    status_code = 400
    default_detail = 'Attendance operation failed.'
    default_code = 'attendance_error'


class ScheduleNotFoundError(AttendanceServiceError):
    status_code = 404
    default_detail = 'Schedule not found.'
    default_code = 'schedule_not_found'


class TeamNotFoundError(AttendanceServiceError):
    status_code = 404
    default_detail = 'Team not found.'
    default_code = 'team_not_found'


class NotTeamLeaderError(AttendanceServiceError):
    """User does not lead the team."""
    status_code = 403
    default_detail = 'You are not a leader of this team.'
    default_code = 'not_team_leader'


class NotTeamMemberError(AttendanceServiceError):
    """User neither leads nor belongs to the team."""
    status_code = 403
    default_detail = 'You do not belong to this team.'
    default_code = 'not_team_member'


class ScheduleDateMissingError(AttendanceServiceError):
    """Attendance needs a dated visit or meeting."""
    status_code = 403
    default_detail = 'Cannot register attendance without a valid meeting or visit date.'
    default_code = 'schedule_date_missing'


class ScheduleTeamMismatchError(AttendanceServiceError):
    status_code = 403
    default_detail = 'This schedule does not belong to the given team.'
    default_code = 'schedule_team_mismatch'


class MemberNotInTeamError(AttendanceServiceError):
    status_code = 400
    default_detail = 'Member not found in team.'
    default_code = 'member_not_in_team'


class EmptyAttendanceListError(AttendanceServiceError):
    status_code = 400
    default_detail = 'At least one attendance entry is required.'
    default_code = 'empty_attendance_list'
