# ==========================================
# apps/visit_reports/models.py
# ==========================================

from django.db import models
import uuid


class VisitReport(models.Model):
    """Numbers a leader files after a shelter visit; one per schedule."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    schedule = models.OneToOneField(
        'schedules.ShelterSchedule',
        on_delete=models.CASCADE,
        related_name='visit_report',
    )
    team_members_present = models.PositiveIntegerField(default=0)
    sheltered_heard_message = models.PositiveIntegerField(default=0)
    caretakers_heard_message = models.PositiveIntegerField(default=0)
    sheltered_decisions = models.PositiveIntegerField(default=0)
    caretakers_decisions = models.PositiveIntegerField(default=0)
    observation = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'visit_reports'
        ordering = ['-created_at']

    def __str__(self):
        return f"Report for {self.schedule}"
