from rest_framework import serializers

from .models import Attendance, AttendanceType, AttendanceCategory


# =============================================================================
# Input serializers
# =============================================================================

class RegisterAttendanceSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=AttendanceType.choices)
    category = serializers.ChoiceField(
        choices=AttendanceCategory.choices,
        required=False,
        default=AttendanceCategory.VISIT,
    )
    comment = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class TeamAttendanceEntrySerializer(serializers.Serializer):
    member_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=AttendanceType.choices)
    comment = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class RegisterTeamAttendanceSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    schedule_id = serializers.UUIDField()
    category = serializers.ChoiceField(
        choices=AttendanceCategory.choices,
        required=False,
        default=AttendanceCategory.VISIT,
    )
    attendances = TeamAttendanceEntrySerializer(many=True, allow_empty=False)


class DateRangeFilterSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': 'end_date must not be before start_date'})
        return attrs


class TeamSchedulesFilterSerializer(DateRangeFilterSerializer):
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')


class StatsFilterSerializer(DateRangeFilterSerializer):
    team_id = serializers.UUIDField(required=False)


class AttendanceRecordFilterSerializer(DateRangeFilterSerializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)
    type = serializers.ChoiceField(choices=AttendanceType.choices, required=False)
    category = serializers.ChoiceField(choices=AttendanceCategory.choices, required=False)
    team_id = serializers.UUIDField(required=False)
    member_id = serializers.UUIDField(required=False)
    schedule_id = serializers.UUIDField(required=False)
    member_name = serializers.CharField(required=False, allow_blank=True)
    sort_by = serializers.ChoiceField(
        choices=['created_at', 'visit_date', 'meeting_date'],
        required=False,
        default='created_at',
    )
    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')


# =============================================================================
# Output serializers
# =============================================================================

class AttendanceRecordSerializer(serializers.ModelSerializer):
    """Attendance record flattened with its member, schedule, team and shelter."""

    member_id = serializers.UUIDField(source='member.id', read_only=True)
    member_name = serializers.CharField(source='member.name', read_only=True)
    member_email = serializers.EmailField(source='member.email', read_only=True)
    schedule_id = serializers.UUIDField(source='schedule.id', read_only=True)
    visit_number = serializers.IntegerField(source='schedule.visit_number', read_only=True)
    visit_date = serializers.DateField(source='schedule.visit_date', read_only=True)
    meeting_date = serializers.DateField(source='schedule.meeting_date', read_only=True)
    lesson_content = serializers.CharField(source='schedule.lesson_content', read_only=True)
    observation = serializers.CharField(source='schedule.observation', read_only=True)
    meeting_room = serializers.CharField(source='schedule.meeting_room', read_only=True)
    team_name = serializers.CharField(source='schedule.team.display_name', read_only=True)
    shelter_name = serializers.CharField(source='schedule.team.shelter.name', read_only=True)

    class Meta:
        model = Attendance
        fields = [
            'id',
            'type',
            'category',
            'comment',
            'member_id',
            'member_name',
            'member_email',
            'schedule_id',
            'visit_number',
            'visit_date',
            'meeting_date',
            'lesson_content',
            'observation',
            'meeting_room',
            'team_name',
            'shelter_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SheetRecordSerializer(serializers.ModelSerializer):
    member_id = serializers.UUIDField(source='member.id', read_only=True)
    member_name = serializers.CharField(source='member.name', read_only=True)
    member_email = serializers.EmailField(source='member.email', read_only=True)

    class Meta:
        model = Attendance
        fields = ['id', 'type', 'category', 'comment', 'member_id', 'member_name',
                  'member_email', 'created_at', 'updated_at']
        read_only_fields = fields


class PendingMemberSerializer(serializers.Serializer):
    member_id = serializers.UUIDField()
    member_name = serializers.CharField()
    member_email = serializers.EmailField()
    role = serializers.CharField()


class LeaderPendingSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    category = serializers.CharField()
    date = serializers.DateField()
    location = serializers.CharField()
    visit_number = serializers.IntegerField()
    lesson_content = serializers.CharField()
    team_id = serializers.UUIDField()
    team_name = serializers.CharField()
    shelter_name = serializers.CharField()
    total_members = serializers.IntegerField()
    pending_members = PendingMemberSerializer(many=True)


class MemberPendingSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    category = serializers.CharField()
    date = serializers.DateField()
    location = serializers.CharField()
    visit_number = serializers.IntegerField()
    lesson_content = serializers.CharField()
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    team_name = serializers.CharField()
    shelter_name = serializers.CharField()


class AllPendingsSerializer(serializers.Serializer):
    role = serializers.CharField()
    team_pendings = LeaderPendingSerializer(many=True)
    my_pendings = MemberPendingSerializer(many=True)
    total_pending = serializers.IntegerField()


class TeamMemberRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField()


class TeamMembersSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    shelter_name = serializers.CharField()
    members = TeamMemberRowSerializer(many=True)


class TeamScheduleRowSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    category = serializers.CharField()
    date = serializers.DateField()
    visit_number = serializers.IntegerField()
    lesson_content = serializers.CharField()
    observation = serializers.CharField(allow_blank=True)
    location = serializers.CharField()
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    team_name = serializers.CharField()
    shelter_name = serializers.CharField()
    attendance_count = serializers.IntegerField()
    total_members = serializers.IntegerField()


class LeaderTeamSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    shelter_id = serializers.UUIDField()
    shelter_name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    member_count = serializers.IntegerField()


class TeamWithMembersSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    description = serializers.CharField(allow_blank=True)
    members = TeamMemberRowSerializer(many=True)


class ShelterTeamsMembersSerializer(serializers.Serializer):
    shelter_id = serializers.UUIDField()
    shelter_name = serializers.CharField()
    teams = TeamWithMembersSerializer(many=True)


class PageMetaSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_prev = serializers.BooleanField()


class AttendanceRecordPageSerializer(serializers.Serializer):
    results = AttendanceRecordSerializer(many=True)
    meta = PageMetaSerializer()


class AttendanceStatsSerializer(serializers.Serializer):
    total_events = serializers.IntegerField()
    total_attendance_records = serializers.IntegerField()
    present_count = serializers.IntegerField()
    absent_count = serializers.IntegerField()
    attendance_rate = serializers.IntegerField()
    pending_count = serializers.IntegerField()


class TeamAttendanceStatsSerializer(AttendanceStatsSerializer):
    total_members = serializers.IntegerField()
    expected_records = serializers.IntegerField()
    completion_rate = serializers.IntegerField()


class SheetSlotSerializer(serializers.Serializer):
    schedule_id = serializers.UUIDField()
    category = serializers.CharField()
    date = serializers.DateField()
    visit_number = serializers.IntegerField()
    lesson_content = serializers.CharField()
    observation = serializers.CharField(allow_blank=True)
    location = serializers.CharField()
    total_members = serializers.IntegerField()
    present_count = serializers.IntegerField()
    absent_count = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    attendance_records = SheetRecordSerializer(many=True)


class SheetTeamSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()
    team_number = serializers.IntegerField()
    team_name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    total_schedules = serializers.IntegerField()
    schedules = SheetSlotSerializer(many=True)


class SheetShelterSerializer(serializers.Serializer):
    shelter_id = serializers.UUIDField()
    shelter_name = serializers.CharField()
    total_teams = serializers.IntegerField()
    teams = SheetTeamSerializer(many=True)
