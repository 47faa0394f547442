from .report_management import (
    get_visit_report,
    create_visit_report,
    update_visit_report,
    delete_visit_report,
    list_visit_reports_for_user,
    find_pending_visit_reports,
)
from .exceptions import (
    VisitReportsServiceError,
    VisitReportNotFoundError,
    ScheduleNotFoundError,
    VisitNotHappenedError,
    DuplicateVisitReportError,
    ReportAccessError,
)

__all__ = [
    'get_visit_report',
    'create_visit_report',
    'update_visit_report',
    'delete_visit_report',
    'list_visit_reports_for_user',
    'find_pending_visit_reports',
    'VisitReportsServiceError',
    'VisitReportNotFoundError',
    'ScheduleNotFoundError',
    'VisitNotHappenedError',
    'DuplicateVisitReportError',
    'ReportAccessError',
]
