"""
Attendance HTTP handlers.

Service exceptions are APIException subclasses, so DRF turns them into
responses with their own status codes.
"""

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminOrLeader
from .serializers import (
    RegisterAttendanceSerializer,
    RegisterTeamAttendanceSerializer,
    DateRangeFilterSerializer,
    TeamSchedulesFilterSerializer,
    StatsFilterSerializer,
    AttendanceRecordFilterSerializer,
    AttendanceRecordSerializer,
    LeaderPendingSerializer,
    MemberPendingSerializer,
    AllPendingsSerializer,
    TeamMembersSerializer,
    TeamScheduleRowSerializer,
    LeaderTeamSerializer,
    ShelterTeamsMembersSerializer,
    AttendanceRecordPageSerializer,
    AttendanceStatsSerializer,
    TeamAttendanceStatsSerializer,
    SheetShelterSerializer,
)
from .services import (
    register_attendance,
    register_team_attendance,
    find_pendings_for_leader,
    find_pendings_for_member,
    find_all_pendings,
    list_team_members,
    list_team_schedules,
    list_leader_teams,
    list_leader_teams_with_members,
    list_attendance_records,
    get_attendance_stats,
    get_team_attendance_stats,
    list_attendance_sheets_hierarchical,
)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Registration
# =============================================================================

@extend_schema(
    request=RegisterAttendanceSerializer,
    responses={201: AttendanceRecordSerializer},
    description="Register the current user's own presence or absence.",
    tags=['attendance'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def register(request):
    data = _validated(RegisterAttendanceSerializer, request.data)
    attendance = register_attendance(user=request.user, **data)
    return Response(AttendanceRecordSerializer(attendance).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=RegisterTeamAttendanceSerializer,
    responses={201: AttendanceRecordSerializer(many=True)},
    description="Register attendance for several members of a team (leaders).",
    tags=['attendance'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def register_team(request):
    data = _validated(RegisterTeamAttendanceSerializer, request.data)
    attendances = register_team_attendance(user=request.user, **data)
    return Response(
        AttendanceRecordSerializer(attendances, many=True).data,
        status=status.HTTP_201_CREATED
    )


# =============================================================================
# Pendings
# =============================================================================

@extend_schema(
    responses={200: AllPendingsSerializer},
    description="Pending attendance as the user's role sees it.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pending_all(request):
    result = find_all_pendings(user=request.user, today=timezone.localdate())
    return Response(AllPendingsSerializer(result).data)


@extend_schema(
    responses={200: LeaderPendingSerializer(many=True)},
    description="Past slots of a team with the members missing a record.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def pending_leader(request, team_id):
    pendings = find_pendings_for_leader(
        user=request.user,
        team_id=team_id,
        today=timezone.localdate(),
    )
    return Response(LeaderPendingSerializer(pendings, many=True).data)


@extend_schema(
    responses={200: MemberPendingSerializer(many=True)},
    description="The current user's own past slots without a record.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pending_member(request):
    pendings = find_pendings_for_member(user=request.user, today=timezone.localdate())
    return Response(MemberPendingSerializer(pendings, many=True).data)


# =============================================================================
# Teams
# =============================================================================

@extend_schema(responses={200: TeamMembersSerializer}, tags=['attendance'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def team_members(request, team_id):
    return Response(TeamMembersSerializer(list_team_members(user=request.user, team_id=team_id)).data)


@extend_schema(
    parameters=[TeamSchedulesFilterSerializer],
    responses={200: TeamScheduleRowSerializer(many=True)},
    description="Dated slots of a team's schedules with attendance counts.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def team_schedules(request, team_id):
    filters = _validated(TeamSchedulesFilterSerializer, request.query_params)
    rows = list_team_schedules(user=request.user, team_id=team_id, **filters)
    return Response(TeamScheduleRowSerializer(rows, many=True).data)


@extend_schema(responses={200: LeaderTeamSerializer(many=True)}, tags=['attendance'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def leader_teams(request):
    return Response(LeaderTeamSerializer(list_leader_teams(user=request.user), many=True).data)


@extend_schema(responses={200: ShelterTeamsMembersSerializer(many=True)}, tags=['attendance'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def leader_teams_members(request):
    shelters = list_leader_teams_with_members(user=request.user)
    return Response(ShelterTeamsMembersSerializer(shelters, many=True).data)


# =============================================================================
# Records, stats and sheets
# =============================================================================

@extend_schema(
    parameters=[AttendanceRecordFilterSerializer],
    responses={200: AttendanceRecordPageSerializer},
    description="Filtered and paginated attendance records.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def records(request):
    filters = _validated(AttendanceRecordFilterSerializer, request.query_params)
    page = list_attendance_records(user=request.user, **filters)
    return Response(AttendanceRecordPageSerializer(page).data)


@extend_schema(
    parameters=[StatsFilterSerializer],
    responses={200: AttendanceStatsSerializer},
    description="The current user's attendance summary.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stats(request):
    filters = _validated(StatsFilterSerializer, request.query_params)
    result = get_attendance_stats(user=request.user, today=timezone.localdate(), **filters)
    return Response(AttendanceStatsSerializer(result).data)


@extend_schema(
    parameters=[DateRangeFilterSerializer],
    responses={200: TeamAttendanceStatsSerializer},
    description="Attendance summary of a team over its past slots.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def team_stats(request, team_id):
    filters = _validated(DateRangeFilterSerializer, request.query_params)
    result = get_team_attendance_stats(
        user=request.user,
        team_id=team_id,
        today=timezone.localdate(),
        **filters
    )
    return Response(TeamAttendanceStatsSerializer(result).data)


@extend_schema(
    parameters=[DateRangeFilterSerializer],
    responses={200: SheetShelterSerializer(many=True)},
    description="Shelter > team > slot attendance sheets.",
    tags=['attendance'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminOrLeader])
def sheets_hierarchical(request):
    filters = _validated(DateRangeFilterSerializer, request.query_params)
    shelters = list_attendance_sheets_hierarchical(user=request.user, **filters)
    return Response(SheetShelterSerializer(shelters, many=True).data)
