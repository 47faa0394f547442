"""
E-mail every leader a summary of their teams' pending attendance.

Usage:
    python manage.py send_attendance_reminders
    python manage.py send_attendance_reminders --dry-run --date 2024-05-10
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.communication.services import send_attendance_reminders


class Command(BaseCommand):
    help = "E-mail leaders the attendance still missing on their teams"

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List who would be reminded without sending anything',
        )
        parser.add_argument(
            '--date',
            help='Reference day (YYYY-MM-DD); slots before it count as pending',
        )

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['date']} (expected YYYY-MM-DD)")

        sent = send_attendance_reminders(today=today, dry_run=options['dry_run'])

        verb = 'Would send' if options['dry_run'] else 'Sent'
        self.stdout.write(self.style.SUCCESS(f'{verb} {sent} reminder(s) for {today.isoformat()}'))
