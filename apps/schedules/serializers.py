from rest_framework import serializers

from .models import ShelterSchedule, Event, EventAudience


class ShelterScheduleSerializer(serializers.ModelSerializer):
    """Schedule with its team and shelter."""

    team_id = serializers.UUIDField(read_only=True)
    team_number = serializers.IntegerField(source='team.number', read_only=True)
    team_name = serializers.CharField(source='team.display_name', read_only=True)
    shelter_id = serializers.UUIDField(source='team.shelter_id', read_only=True)
    shelter_name = serializers.CharField(source='team.shelter.name', read_only=True)

    class Meta:
        model = ShelterSchedule
        fields = [
            'id',
            'team_id',
            'team_number',
            'team_name',
            'shelter_id',
            'shelter_name',
            'visit_number',
            'visit_date',
            'meeting_date',
            'lesson_content',
            'observation',
            'meeting_room',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ScheduleCreateSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    visit_number = serializers.IntegerField(min_value=1)
    visit_date = serializers.DateField(required=False, allow_null=True, default=None)
    meeting_date = serializers.DateField(required=False, allow_null=True, default=None)
    lesson_content = serializers.CharField()
    observation = serializers.CharField(required=False, allow_blank=True, default='')
    meeting_room = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class ScheduleUpdateSerializer(serializers.Serializer):
    """All fields optional; a null date clears that slot."""

    team_id = serializers.UUIDField(required=False)
    visit_number = serializers.IntegerField(min_value=1, required=False)
    visit_date = serializers.DateField(required=False, allow_null=True)
    meeting_date = serializers.DateField(required=False, allow_null=True)
    lesson_content = serializers.CharField(required=False)
    observation = serializers.CharField(required=False, allow_blank=True)
    meeting_room = serializers.CharField(max_length=100, required=False, allow_blank=True)


class EventSerializer(serializers.ModelSerializer):
    schedule_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Event
        fields = [
            'id',
            'title',
            'description',
            'date',
            'location',
            'audience',
            'event_type',
            'schedule_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class EventWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateField()
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    audience = serializers.ChoiceField(choices=EventAudience.choices, required=False)


class EventFilterSerializer(serializers.Serializer):
    upcoming = serializers.BooleanField(required=False, default=False)


class ScheduleFilterSerializer(serializers.Serializer):
    team_id = serializers.UUIDField(required=False)
