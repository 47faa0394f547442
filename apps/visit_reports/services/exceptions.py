"""Domain-specific exceptions for visit report services."""


class VisitReportsServiceError(Exception):
    """Base exception for visit report services."""
    pass


class VisitReportNotFoundError(VisitReportsServiceError):
    pass


class ScheduleNotFoundError(VisitReportsServiceError):
    pass


class VisitNotHappenedError(VisitReportsServiceError):
    """Raised when the schedule has no visit date or it is still ahead."""
    pass


class DuplicateVisitReportError(VisitReportsServiceError):
    """Raised when the schedule already has a report."""
    pass


class ReportAccessError(VisitReportsServiceError):
    """Raised when a leader touches a report of a team they don't lead."""
    pass
