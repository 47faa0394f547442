from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.models import UserRole
from apps.accounts.permissions import IsAdmin, IsAdminOrLeader
from .models import Shelter, Team, LeaderProfile, MemberProfile
from .permissions import IsAdminOrReadOnly
from .serializers import (
    ShelterSerializer,
    ShelterListSerializer,
    ShelterWriteSerializer,
    TeamSerializer,
    TeamCreateSerializer,
    TeamUpdateSerializer,
    LeaderProfileSerializer,
    MemberProfileSerializer,
    TeamAssignmentSerializer,
    RemoveLeaderTeamSerializer,
    LeaderShelterSerializer,
    TeamFilterSerializer,
    MemberFilterSerializer,
)
from .services import (
    create_shelter,
    update_shelter,
    delete_shelter,
    create_team,
    update_team,
    delete_team,
    get_teams_for_user,
    assign_leader_to_team,
    remove_leader_from_team,
    assign_member_to_team,
    unassign_member,
    get_leader_shelters,
    # Exceptions
    ShelterNotFoundError,
    TeamNotFoundError,
    DuplicateTeamError,
    ProfileNotFoundError,
)


class ShelterPagination(PageNumberPagination):
    """Custom pagination for shelters and profiles."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ShelterViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Shelter CRUD operations.

    list: Search shelters by name or city (?search=)
    create/update/destroy: Admin only
    teams: Teams of a shelter
    """

    queryset = Shelter.objects.prefetch_related('teams')
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = ShelterPagination

    def get_queryset(self):
        queryset = Shelter.objects.prefetch_related('teams')
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(city__icontains=search))
        return queryset.order_by('name')

    def get_serializer_class(self):
        if self.action == 'list':
            return ShelterListSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return ShelterWriteSerializer
        return ShelterSerializer

    def create(self, request, *args, **kwargs):
        serializer = ShelterWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        shelter = create_shelter(**serializer.validated_data)
        return Response(ShelterSerializer(shelter).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = ShelterWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            shelter = update_shelter(shelter_id=self.kwargs['pk'], **serializer.validated_data)
        except ShelterNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(ShelterSerializer(shelter).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_shelter(shelter_id=self.kwargs['pk'])
        except ShelterNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def teams(self, request, pk=None):
        """Get all teams of the shelter."""
        shelter = self.get_object()
        teams = shelter.teams.select_related('shelter').order_by('number')
        return Response(TeamSerializer(teams, many=True).data)


class TeamViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Team CRUD operations.

    list: Teams visible to the user (admin all, leader led, member own)
    create/update/destroy: Admin only
    """

    queryset = Team.objects.select_related('shelter')
    serializer_class = TeamSerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        filters = TeamFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)

        queryset = get_teams_for_user(user=self.request.user)
        shelter_id = filters.validated_data.get('shelter_id')
        if shelter_id:
            queryset = queryset.filter(shelter_id=shelter_id)
        return queryset.order_by('shelter__name', 'number')

    def create(self, request, *args, **kwargs):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            team = create_team(**serializer.validated_data)
        except ShelterNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateTeamError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(TeamSerializer(team).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', None)
        serializer = TeamUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            team = update_team(team_id=self.kwargs['pk'], **serializer.validated_data)
        except TeamNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateTeamError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(TeamSerializer(team).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_team(team_id=self.kwargs['pk'])
        except TeamNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LeaderProfileViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Leader profiles (admin and leaders).

    assign_team / remove_team: Admin only
    """

    serializer_class = LeaderProfileSerializer
    permission_classes = [IsAuthenticated, IsAdminOrLeader]
    pagination_class = ShelterPagination

    def get_queryset(self):
        queryset = (
            LeaderProfile.objects
            .select_related('user')
            .prefetch_related('teams__shelter')
        )
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(user__name__icontains=search) | Q(user__email__icontains=search)
            )
        return queryset.order_by('user__name')

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdmin])
    def assign_team(self, request, pk=None):
        """Link the leader to a shelter team by number."""
        serializer = TeamAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            leader = assign_leader_to_team(leader_profile_id=pk, **serializer.validated_data)
        except (ProfileNotFoundError, ShelterNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(LeaderProfileSerializer(leader).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdmin])
    def remove_team(self, request, pk=None):
        """Unlink the leader from a team."""
        serializer = RemoveLeaderTeamSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            leader = remove_leader_from_team(
                leader_profile_id=pk,
                team_id=serializer.validated_data['team_id'],
            )
        except (ProfileNotFoundError, TeamNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(LeaderProfileSerializer(leader).data)


class MemberProfileViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Member profiles.

    Admins see every member, leaders the members of the teams they lead
    and members not yet on any team.
    """

    serializer_class = MemberProfileSerializer
    permission_classes = [IsAuthenticated, IsAdminOrLeader]
    pagination_class = ShelterPagination

    def get_queryset(self):
        filters = MemberFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)

        user = self.request.user
        queryset = MemberProfile.objects.select_related('user', 'team__shelter')
        if user.role != UserRole.ADMIN:
            queryset = queryset.filter(Q(team__leaders__user=user) | Q(team__isnull=True)).distinct()

        team_id = filters.validated_data.get('team_id')
        if team_id:
            queryset = queryset.filter(team_id=team_id)
        search = filters.validated_data.get('search')
        if search:
            queryset = queryset.filter(
                Q(user__name__icontains=search) | Q(user__email__icontains=search)
            )
        return queryset.order_by('user__name')

    @action(detail=True, methods=['post'])
    def assign_team(self, request, pk=None):
        """Move the member to a shelter team by number."""
        member = self.get_object()
        serializer = TeamAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if request.user.role != UserRole.ADMIN:
            leads_target = Team.objects.filter(
                shelter_id=serializer.validated_data['shelter_id'],
                number=serializer.validated_data['team_number'],
                leaders__user=request.user,
            ).exists()
            if not leads_target:
                return Response(
                    {'error': 'You can only assign members to teams you lead'},
                    status=status.HTTP_403_FORBIDDEN
                )

        try:
            member = assign_member_to_team(member_profile_id=member.id, **serializer.validated_data)
        except (ProfileNotFoundError, ShelterNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(MemberProfileSerializer(member).data)

    @action(detail=True, methods=['post'])
    def unassign(self, request, pk=None):
        """Take the member off their team."""
        member = self.get_object()
        member = unassign_member(member_profile_id=member.id)
        return Response(MemberProfileSerializer(member).data)


@extend_schema(
    responses={200: LeaderShelterSerializer(many=True)},
    description="Shelters where the current leader leads a team, with all their teams.",
    tags=['shelters'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_shelters(request):
    if request.user.role != UserRole.LEADER:
        return Response(
            {'error': 'Only leaders can access their shelters'},
            status=status.HTTP_403_FORBIDDEN
        )

    try:
        shelters = get_leader_shelters(user=request.user)
    except ProfileNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(LeaderShelterSerializer(shelters, many=True).data)
