# ==========================================
# apps/shelters/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
import uuid


class Shelter(models.Model):
    """A shelter (orphanage) visited by volunteer teams."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    teams_quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(0)])

    # Address
    street = models.CharField(max_length=200, blank=True)
    number = models.CharField(max_length=20, blank=True)
    district = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    complement = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shelters'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name']),
        ]

    def __str__(self):
        return self.name

    def address_line(self):
        """'street, number - city, state' or empty when no street is known."""
        if not self.street:
            return ''
        line = f"{self.street}, {self.number or 's/n'}"
        place = ', '.join(part for part in (self.city, self.state) if part)
        if place:
            line += f" - {place}"
        return line


class Team(models.Model):
    """Numbered volunteer team of a shelter."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shelter = models.ForeignKey(Shelter, on_delete=models.CASCADE, related_name='teams')
    number = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    description = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teams'
        unique_together = [['shelter', 'number']]
        ordering = ['shelter__name', 'number']

    def __str__(self):
        return f"{self.shelter.name} - {self.display_name}"

    @property
    def display_name(self):
        return self.description or f"Team {self.number}"

    def member_users(self):
        """Users holding a member profile on this team."""
        from apps.accounts.models import User
        return User.objects.filter(member_profile__team=self)


class LeaderProfile(models.Model):
    """Leader side of a user; may lead several teams."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='leader_profile')
    active = models.BooleanField(default=True)
    teams = models.ManyToManyField(Team, related_name='leaders', blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leader_profiles'
        ordering = ['user__name']

    def __str__(self):
        return f"Leader {self.user}"


class MemberProfile(models.Model):
    """Member side of a user; belongs to at most one team."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField('accounts.User', on_delete=models.CASCADE, related_name='member_profile')
    active = models.BooleanField(default=True)
    team = models.ForeignKey(
        Team,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'member_profiles'
        ordering = ['user__name']
        indexes = [
            models.Index(fields=['team']),
        ]

    def __str__(self):
        return f"Member {self.user}"
