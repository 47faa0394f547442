"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 1 admin, 2 leaders and 6 members
- 2 shelters with their teams
- A visit cycle of schedules per team (with calendar events)
- Attendance for the visits that already happened
- A visit report for the oldest visit of each team
"""

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.accounts.services import register_user
from apps.attendance.models import Attendance, AttendanceCategory, AttendanceType
from apps.schedules.models import Event, ShelterSchedule
from apps.schedules.services import create_schedule, create_event
from apps.shelters.models import Shelter
from apps.shelters.services import (
    create_shelter,
    assign_leader_to_team,
    assign_member_to_team,
)
from apps.visit_reports.models import VisitReport

PASSWORD = 'password123'

LESSONS = [
    'The good shepherd',
    'Daniel in the lions den',
    'The lost son',
    'David and Goliath',
]


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()
        elif User.objects.filter(email='leader1@example.com').exists():
            self.stdout.write(self.style.WARNING('Sample data already exists, use --clear to recreate it.'))
            return

        self.stdout.write('Creating sample data...')
        today = timezone.localdate()

        users = self.create_users()
        teams = self.create_shelters(users)
        schedules = self.create_schedules(teams, today)
        self.create_attendance(schedules, today)
        self.create_reports(schedules, today)

        create_event(
            title='Volunteer training',
            date=today + timedelta(days=10),
            description='Yearly training for all volunteers',
            location='Main church hall',
        )

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write(f'  admin@example.com / {PASSWORD} (admin)')
        self.stdout.write(f'  leader1@example.com, leader2@example.com / {PASSWORD}')
        self.stdout.write(f'  member1@example.com ... member6@example.com / {PASSWORD}')

    def clear_data(self):
        VisitReport.objects.all().delete()
        Attendance.objects.all().delete()
        Event.objects.all().delete()
        ShelterSchedule.objects.all().delete()
        Shelter.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_users(self):
        self.stdout.write('  Creating users...')

        admin = User.objects.filter(email='admin@example.com').first()
        if admin is None:
            admin = User.objects.create_user(
                email='admin@example.com',
                password=PASSWORD,
                name='Admin',
                role=UserRole.ADMIN,
                is_staff=True,
            )

        leaders = [
            register_user(
                email=f'leader{i}@example.com',
                password=PASSWORD,
                name=f'Leader {i}',
                role=UserRole.LEADER,
            )
            for i in (1, 2)
        ]
        members = [
            register_user(
                email=f'member{i}@example.com',
                password=PASSWORD,
                name=f'Member {i}',
                phone=f'+55119900000{i:02d}',
            )
            for i in range(1, 7)
        ]
        return {'admin': admin, 'leaders': leaders, 'members': members}

    def create_shelters(self, users):
        self.stdout.write('  Creating shelters and teams...')

        esperanca = create_shelter(
            name='Casa Esperanca',
            teams_quantity=2,
            street='Rua das Flores',
            number='120',
            city='Sao Paulo',
            state='SP',
        )
        aurora = create_shelter(name='Lar Aurora', teams_quantity=1)

        leader_1, leader_2 = users['leaders']
        assign_leader_to_team(leader_profile_id=leader_1.leader_profile.id, shelter_id=esperanca.id, team_number=1)
        assign_leader_to_team(leader_profile_id=leader_1.leader_profile.id, shelter_id=aurora.id, team_number=1)
        assign_leader_to_team(leader_profile_id=leader_2.leader_profile.id, shelter_id=esperanca.id, team_number=2)

        placements = [(esperanca, 1), (esperanca, 1), (esperanca, 2), (esperanca, 2), (aurora, 1), (aurora, 1)]
        for member, (shelter, number) in zip(users['members'], placements):
            assign_member_to_team(
                member_profile_id=member.member_profile.id,
                shelter_id=shelter.id,
                team_number=number,
            )

        return list(esperanca.teams.all()) + list(aurora.teams.all())

    def create_schedules(self, teams, today):
        self.stdout.write('  Creating schedules...')

        schedules = []
        for offset, team in enumerate(teams):
            for index, lesson in enumerate(LESSONS):
                visit_date = today + timedelta(days=14 * (index - 2) + offset)
                schedules.append(create_schedule(
                    team_id=team.id,
                    visit_number=index + 1,
                    lesson_content=lesson,
                    visit_date=visit_date,
                    meeting_date=visit_date - timedelta(days=3),
                ))
        return schedules

    def create_attendance(self, schedules, today):
        self.stdout.write('  Creating attendance...')

        for schedule in schedules:
            if schedule.visit_date >= today:
                continue
            for position, member in enumerate(schedule.team.member_users()):
                Attendance.objects.get_or_create(
                    member=member,
                    schedule=schedule,
                    category=AttendanceCategory.VISIT,
                    defaults={
                        'type': AttendanceType.ABSENT if position % 3 == 2 else AttendanceType.PRESENT,
                    },
                )

    def create_reports(self, schedules, today):
        self.stdout.write('  Creating visit reports...')

        for schedule in schedules:
            if schedule.visit_number == 1 and schedule.visit_date < today:
                VisitReport.objects.get_or_create(
                    schedule=schedule,
                    defaults={
                        'team_members_present': 2,
                        'sheltered_heard_message': 14,
                        'caretakers_heard_message': 3,
                        'sheltered_decisions': 2,
                        'caretakers_decisions': 0,
                        'observation': 'Children were very participative.',
                    },
                )
