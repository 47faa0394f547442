"""
Attendance reminder e-mails.

Every active leader with at least one pending slot on their teams gets
one summary e-mail.
"""

import logging
from datetime import date
from typing import List

from apps.accounts.models import User, UserRole

from .emails import send_templated_email

logger = logging.getLogger(__name__)


def collect_leader_reminders(*, today: date) -> List[dict]:
    """One entry per leader that has pending attendance to fill in."""
    from apps.attendance.services import find_all_pendings

    leaders = (
        User.objects
        .filter(role=UserRole.LEADER, is_active=True, leader_profile__active=True)
        .order_by('name', 'email')
    )

    reminders = []
    for leader in leaders:
        pendings = find_all_pendings(user=leader, today=today)['team_pendings']
        if not pendings:
            continue
        reminders.append({
            'leader': leader,
            'pendings': pendings,
            'total_pending': sum(len(item['pending_members']) for item in pendings),
        })
    return reminders


def send_attendance_reminders(*, today: date, dry_run: bool = False) -> int:
    """
    E-mail every leader a summary of their teams' pending attendance.

    Returns:
        Number of reminders sent (or that would be sent on a dry run)
    """
    reminders = collect_leader_reminders(today=today)
    sent = 0

    for reminder in reminders:
        leader = reminder['leader']
        if dry_run:
            logger.info(
                "Dry run: would remind %s of %d pending record(s)",
                leader.email, reminder['total_pending'],
            )
            sent += 1
            continue

        delivered = send_templated_email(
            to=[leader.email],
            subject='Pending attendance',
            template='attendance_reminder',
            context={
                'name': leader.get_display_name(),
                'pendings': reminder['pendings'],
                'total_pending': reminder['total_pending'],
                'today': today,
            },
        )
        if delivered:
            sent += 1

    logger.info("Attendance reminders: %d of %d sent", sent, len(reminders))
    return sent
