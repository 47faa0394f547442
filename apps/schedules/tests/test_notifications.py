"""
Tests for event e-mails.

Tests cover:
- Who receives mail for each audience
- Which message goes out for creates, changes and cancellations
- Audience switches
- Schedule events
"""

import pytest
from datetime import date

from django.core import mail

from apps.schedules.models import EventAudience
from apps.schedules.services import (
    create_event,
    update_event,
    delete_event,
    create_schedule,
    update_schedule,
    delete_schedule,
    audience_recipients,
)


def subjects_by_recipient():
    return {message.to[0]: message.subject for message in mail.outbox}


@pytest.fixture
def everyone(admin_user, leader_user, member_user):
    return [admin_user, leader_user, member_user]


@pytest.mark.django_db
class TestRecipients:

    def test_members_audience_reaches_every_role(self, everyone):
        assert audience_recipients(EventAudience.MEMBERS) == [
            'admin@example.com', 'leader@example.com', 'member@example.com',
        ]

    def test_leaders_audience_skips_members(self, everyone):
        assert audience_recipients(EventAudience.LEADERS) == ['admin@example.com', 'leader@example.com']

    def test_inactive_users_skipped(self, everyone, member_user):
        member_user.is_active = False
        member_user.save()

        assert 'member@example.com' not in audience_recipients(EventAudience.ALL)


@pytest.mark.django_db
class TestEventNotifications:

    def test_create_notifies_after_commit(self, everyone, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            create_event(title='Christmas party', date=date(2024, 12, 20), location='Church hall')

        assert len(callbacks) == 1
        assert mail.outbox == []

        callbacks[0]()

        assert len(mail.outbox) == 3
        assert all(len(message.to) == 1 for message in mail.outbox)
        assert set(subjects_by_recipient().values()) == {'New event'}
        assert 'Christmas party' in mail.outbox[0].body
        assert 'Church hall' in mail.outbox[0].body

    def test_leaders_event_only_reaches_leaders(self, everyone, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            create_event(title='Leaders meeting', date=date(2024, 12, 20), audience=EventAudience.LEADERS)

        assert sorted(subjects_by_recipient()) == ['admin@example.com', 'leader@example.com']

    def test_date_change(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20))

        with django_capture_on_commit_callbacks(execute=True):
            update_event(event_id=event.id, date=date(2024, 12, 21))

        assert set(subjects_by_recipient().values()) == {'Event date changed'}
        assert '21/12/2024' in mail.outbox[0].body

    def test_location_change(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20), location='Hall')

        with django_capture_on_commit_callbacks(execute=True):
            update_event(event_id=event.id, location='Garden')

        assert set(subjects_by_recipient().values()) == {'Event location changed'}

    def test_title_change_is_a_general_update(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20))

        with django_capture_on_commit_callbacks(execute=True):
            update_event(event_id=event.id, title='Big party', date=date(2024, 12, 22))

        assert set(subjects_by_recipient().values()) == {'Event updated'}

    def test_unchanged_values_send_nothing(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20))

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            update_event(event_id=event.id, title='Party')

        assert callbacks == []
        assert mail.outbox == []

    def test_audience_narrowed_to_leaders(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20), audience=EventAudience.MEMBERS)

        with django_capture_on_commit_callbacks(execute=True):
            update_event(event_id=event.id, audience=EventAudience.LEADERS)

        assert subjects_by_recipient() == {
            'admin@example.com': 'Event audience changed',
            'leader@example.com': 'Event audience changed',
            'member@example.com': 'Event no longer available',
        }

    def test_audience_opened_to_all(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20), audience=EventAudience.LEADERS)

        with django_capture_on_commit_callbacks(execute=True):
            update_event(event_id=event.id, audience=EventAudience.ALL)

        assert subjects_by_recipient() == {
            'admin@example.com': 'Event audience changed',
            'leader@example.com': 'Event audience changed',
            'member@example.com': 'New event',
        }

    def test_delete_notifies_cancellation(self, everyone, django_capture_on_commit_callbacks):
        event = create_event(title='Party', date=date(2024, 12, 20))

        with django_capture_on_commit_callbacks(execute=True):
            delete_event(event_id=event.id)

        assert len(mail.outbox) == 3
        assert set(subjects_by_recipient().values()) == {'Event cancelled'}
        assert 'Party' in mail.outbox[0].body

    def test_disabled_by_setting(self, everyone, settings, django_capture_on_commit_callbacks):
        settings.EVENT_EMAIL_NOTIFICATIONS = False

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            create_event(title='Party', date=date(2024, 12, 20))

        assert callbacks == []
        assert mail.outbox == []


@pytest.mark.django_db
class TestScheduleEventNotifications:

    def test_new_visit_notifies(self, everyone, team, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            create_schedule(
                team_id=team.id, visit_number=1, lesson_content='Creation', visit_date=date(2024, 5, 11)
            )

        assert set(subjects_by_recipient().values()) == {'New event'}
        assert 'Visit - Team 1 - Casa Esperanca' in mail.outbox[0].body

    def test_cleared_meeting_is_cancelled(self, everyone, team, django_capture_on_commit_callbacks):
        schedule = create_schedule(
            team_id=team.id, visit_number=1, lesson_content='Creation', meeting_date=date(2024, 5, 8)
        )

        with django_capture_on_commit_callbacks(execute=True):
            update_schedule(schedule_id=schedule.id, meeting_date=None)

        assert set(subjects_by_recipient().values()) == {'Event cancelled'}

    def test_moved_visit_notifies_date_change(self, everyone, team, django_capture_on_commit_callbacks):
        schedule = create_schedule(
            team_id=team.id, visit_number=1, lesson_content='Creation', visit_date=date(2024, 5, 11)
        )

        with django_capture_on_commit_callbacks(execute=True):
            update_schedule(schedule_id=schedule.id, visit_date=date(2024, 5, 18))

        assert set(subjects_by_recipient().values()) == {'Event date changed'}

    def test_deleted_schedule_cancels_events(self, everyone, team, django_capture_on_commit_callbacks):
        schedule = create_schedule(
            team_id=team.id,
            visit_number=1,
            lesson_content='Creation',
            visit_date=date(2024, 5, 11),
            meeting_date=date(2024, 5, 8),
        )

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            delete_schedule(schedule_id=schedule.id)

        assert len(callbacks) == 2
        assert len(mail.outbox) == 6
        assert set(message.subject for message in mail.outbox) == {'Event cancelled'}
