"""Which roles see which events."""

from typing import Iterable, List

from apps.accounts.models import User, UserRole
from apps.schedules.models import EventAudience

VISIBLE_AUDIENCES = {
    UserRole.MEMBER: [EventAudience.ALL, EventAudience.MEMBERS],
    UserRole.LEADER: [EventAudience.ALL, EventAudience.LEADERS, EventAudience.MEMBERS],
}


def can_see(role: str, audience: str) -> bool:
    if role == UserRole.ADMIN:
        return True
    return audience in VISIBLE_AUDIENCES.get(role, [EventAudience.ALL])


def roles_for_audience(audience: str) -> List[str]:
    return [role for role in UserRole.values if can_see(role, audience)]


def role_recipients(roles: Iterable[str]) -> List[str]:
    """E-mails of the active users holding one of the roles."""
    return list(
        User.objects
        .filter(is_active=True, role__in=list(roles))
        .exclude(email='')
        .order_by('email')
        .values_list('email', flat=True)
    )


def audience_recipients(audience: str) -> List[str]:
    return role_recipients(roles_for_audience(audience))
