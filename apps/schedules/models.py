# ==========================================
# apps/schedules/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
import uuid


class ShelterSchedule(models.Model):
    """
    One numbered visit cycle of a team.

    A schedule may carry a visit date (going to the shelter) and a
    meeting date (planning meeting). Either may be missing.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    team = models.ForeignKey('shelters.Team', on_delete=models.CASCADE, related_name='schedules')
    visit_number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    visit_date = models.DateField(null=True, blank=True)
    meeting_date = models.DateField(null=True, blank=True)
    lesson_content = models.TextField()
    observation = models.TextField(blank=True)
    meeting_room = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shelter_schedules'
        unique_together = [['team', 'visit_number']]
        indexes = [
            models.Index(fields=['visit_date']),
            models.Index(fields=['meeting_date']),
        ]
        ordering = ['team', 'visit_number']

    def __str__(self):
        return f"{self.team} - visit {self.visit_number}"

    def date_for(self, category):
        """Date of the visit or meeting slot."""
        return self.visit_date if category == 'visit' else self.meeting_date

    @property
    def first_date(self):
        dates = [d for d in (self.visit_date, self.meeting_date) if d]
        return min(dates) if dates else None


class EventAudience(models.TextChoices):
    ALL = 'all', 'All'
    MEMBERS = 'members', 'Members'
    LEADERS = 'leaders', 'Leaders'


class EventType(models.TextChoices):
    VISIT = 'visit', 'Visit'
    MEETING = 'meeting', 'Meeting'
    CUSTOM = 'custom', 'Custom'


class Event(models.Model):
    """Calendar entry; visit and meeting events mirror a schedule."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    date = models.DateField()
    location = models.CharField(max_length=255, blank=True)
    audience = models.CharField(max_length=20, choices=EventAudience.choices, default=EventAudience.ALL)
    event_type = models.CharField(max_length=20, choices=EventType.choices, default=EventType.CUSTOM)
    schedule = models.ForeignKey(
        ShelterSchedule,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='events',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'
        indexes = [
            models.Index(fields=['date']),
            models.Index(fields=['schedule', 'event_type']),
        ]
        ordering = ['date']

    def __str__(self):
        return f"{self.title} ({self.date})"
