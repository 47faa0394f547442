from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Shelter, Team, LeaderProfile, MemberProfile


class TeamSerializer(serializers.ModelSerializer):
    """Team with its shelter reference and head counts."""

    shelter_id = serializers.UUIDField(read_only=True)
    shelter_name = serializers.CharField(source='shelter.name', read_only=True)
    display_name = serializers.CharField(read_only=True)
    leaders_count = serializers.SerializerMethodField()
    members_count = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = [
            'id',
            'shelter_id',
            'shelter_name',
            'number',
            'description',
            'display_name',
            'leaders_count',
            'members_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_leaders_count(self, obj):
        return obj.leaders.count()

    def get_members_count(self, obj):
        return obj.members.count()


class TeamCreateSerializer(serializers.Serializer):
    shelter_id = serializers.UUIDField()
    number = serializers.IntegerField(min_value=1)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class TeamUpdateSerializer(serializers.Serializer):
    number = serializers.IntegerField(min_value=1, required=False)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)


class ShelterSerializer(serializers.ModelSerializer):
    """Full shelter details including teams."""

    teams = TeamSerializer(many=True, read_only=True)
    address = serializers.SerializerMethodField()

    class Meta:
        model = Shelter
        fields = [
            'id',
            'name',
            'description',
            'teams_quantity',
            'street',
            'number',
            'district',
            'city',
            'state',
            'postal_code',
            'complement',
            'address',
            'teams',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_address(self, obj):
        return obj.address_line()


class ShelterListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for shelter lists."""

    class Meta:
        model = Shelter
        fields = ['id', 'name', 'city', 'state', 'teams_quantity', 'created_at']
        read_only_fields = fields


class ShelterWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    teams_quantity = serializers.IntegerField(min_value=0, required=False, default=1)
    street = serializers.CharField(max_length=200, required=False, allow_blank=True)
    number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    district = serializers.CharField(max_length=100, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=50, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    complement = serializers.CharField(max_length=200, required=False, allow_blank=True)


class LeaderProfileSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    teams = TeamSerializer(many=True, read_only=True)

    class Meta:
        model = LeaderProfile
        fields = ['id', 'user', 'active', 'teams', 'created_at']
        read_only_fields = fields


class MemberProfileSerializer(serializers.ModelSerializer):
    user = UserPublicSerializer(read_only=True)
    team = TeamSerializer(read_only=True)

    class Meta:
        model = MemberProfile
        fields = ['id', 'user', 'active', 'team', 'created_at']
        read_only_fields = fields


class TeamAssignmentSerializer(serializers.Serializer):
    """Shelter plus team number; the team is created if missing."""

    shelter_id = serializers.UUIDField()
    team_number = serializers.IntegerField(min_value=1)


class RemoveLeaderTeamSerializer(serializers.Serializer):
    team_id = serializers.UUIDField()


class LeaderTeamStatusSerializer(serializers.Serializer):
    team = TeamSerializer()
    is_leader = serializers.BooleanField()


class LeaderShelterSerializer(serializers.Serializer):
    shelter = ShelterListSerializer()
    teams = LeaderTeamStatusSerializer(many=True)


class TeamFilterSerializer(serializers.Serializer):
    shelter_id = serializers.UUIDField(required=False)


class MemberFilterSerializer(serializers.Serializer):
    team_id = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
