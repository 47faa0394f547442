from rest_framework import serializers

from apps.schedules.models import ShelterSchedule
from .models import VisitReport


class VisitReportSerializer(serializers.ModelSerializer):
    """Report with the schedule, team and shelter it belongs to."""

    schedule_id = serializers.UUIDField(read_only=True)
    visit_number = serializers.IntegerField(source='schedule.visit_number', read_only=True)
    visit_date = serializers.DateField(source='schedule.visit_date', read_only=True)
    lesson_content = serializers.CharField(source='schedule.lesson_content', read_only=True)
    team_id = serializers.UUIDField(source='schedule.team_id', read_only=True)
    team_number = serializers.IntegerField(source='schedule.team.number', read_only=True)
    shelter_id = serializers.UUIDField(source='schedule.team.shelter_id', read_only=True)
    shelter_name = serializers.CharField(source='schedule.team.shelter.name', read_only=True)

    class Meta:
        model = VisitReport
        fields = [
            'id',
            'schedule_id',
            'visit_number',
            'visit_date',
            'lesson_content',
            'team_id',
            'team_number',
            'shelter_id',
            'shelter_name',
            'team_members_present',
            'sheltered_heard_message',
            'caretakers_heard_message',
            'sheltered_decisions',
            'caretakers_decisions',
            'observation',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class VisitReportCreateSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    team_members_present = serializers.IntegerField(min_value=0)
    sheltered_heard_message = serializers.IntegerField(min_value=0)
    caretakers_heard_message = serializers.IntegerField(min_value=0)
    sheltered_decisions = serializers.IntegerField(min_value=0)
    caretakers_decisions = serializers.IntegerField(min_value=0)
    observation = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VisitReportUpdateSerializer(serializers.Serializer):
    team_members_present = serializers.IntegerField(min_value=0, required=False)
    sheltered_heard_message = serializers.IntegerField(min_value=0, required=False)
    caretakers_heard_message = serializers.IntegerField(min_value=0, required=False)
    sheltered_decisions = serializers.IntegerField(min_value=0, required=False)
    caretakers_decisions = serializers.IntegerField(min_value=0, required=False)
    observation = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VisitReportFilterSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField(required=False)
    team_id = serializers.UUIDField(required=False)
    shelter_id = serializers.UUIDField(required=False)


class PendingVisitReportSerializer(serializers.ModelSerializer):
    """Past visit still waiting for its report."""

    schedule_id = serializers.UUIDField(source='id', read_only=True)
    team_id = serializers.UUIDField(read_only=True)
    team_number = serializers.IntegerField(source='team.number', read_only=True)
    shelter_name = serializers.CharField(source='team.shelter.name', read_only=True)

    class Meta:
        model = ShelterSchedule
        fields = [
            'schedule_id',
            'visit_number',
            'visit_date',
            'lesson_content',
            'team_id',
            'team_number',
            'shelter_name',
        ]
        read_only_fields = fields
