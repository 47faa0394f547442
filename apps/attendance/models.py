# ==========================================
# apps/attendance/models.py
# ==========================================

from django.db import models
import uuid


class AttendanceType(models.TextChoices):
    PRESENT = 'present', 'Present'
    ABSENT = 'absent', 'Absent'


class AttendanceCategory(models.TextChoices):
    VISIT = 'visit', 'Visit'
    MEETING = 'meeting', 'Meeting'


class Attendance(models.Model):
    """Presence or absence of one member at one slot of a schedule."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='attendances')
    schedule = models.ForeignKey(
        'schedules.ShelterSchedule',
        on_delete=models.CASCADE,
        related_name='attendances',
    )
    type = models.CharField(max_length=10, choices=AttendanceType.choices)
    category = models.CharField(
        max_length=10,
        choices=AttendanceCategory.choices,
        default=AttendanceCategory.VISIT,
    )
    comment = models.CharField(max_length=500, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'attendances'
        unique_together = [['member', 'schedule', 'category']]
        indexes = [
            models.Index(fields=['schedule', 'category']),
            models.Index(fields=['member', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.member} - {self.schedule} ({self.category}: {self.type})"
