"""Domain-specific exceptions for schedules services."""


class SchedulesServiceError(Exception):
    """Base exception for schedules services."""
    pass


class ScheduleNotFoundError(SchedulesServiceError):
    pass


class EventNotFoundError(SchedulesServiceError):
    pass


class TeamNotFoundError(SchedulesServiceError):
    pass


class DuplicateVisitNumberError(SchedulesServiceError):
    """Raised when the team already has a schedule with this visit number."""
    pass


class ScheduleAccessError(SchedulesServiceError):
    """Raised when a leader edits a schedule of a team they don't lead."""
    pass
