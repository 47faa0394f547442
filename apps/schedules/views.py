from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination

from apps.accounts.permissions import IsAdmin, IsAdminOrLeader
from .serializers import (
    ShelterScheduleSerializer,
    ScheduleCreateSerializer,
    ScheduleUpdateSerializer,
    EventSerializer,
    EventWriteSerializer,
    EventFilterSerializer,
    ScheduleFilterSerializer,
)
from .services import (
    create_schedule,
    update_schedule,
    delete_schedule,
    list_schedules_for_user,
    create_event,
    update_event,
    delete_event,
    list_events_for_user,
    # Exceptions
    ScheduleNotFoundError,
    EventNotFoundError,
    TeamNotFoundError,
    DuplicateVisitNumberError,
    ScheduleAccessError,
)


class SchedulePagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ShelterScheduleViewSet(viewsets.ModelViewSet):
    """
    ViewSet for shelter schedules.

    list/retrieve: Role scoped (admin all, leader led teams, member own team)
    create/update/destroy: Admins, and leaders on the teams they lead
    """

    serializer_class = ShelterScheduleSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SchedulePagination

    def get_queryset(self):
        filters = ScheduleFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_schedules_for_user(
            user=self.request.user,
            team_id=filters.validated_data.get('team_id'),
        )

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsAdminOrLeader()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = ScheduleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            schedule = create_schedule(user=request.user, **serializer.validated_data)
        except TeamNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ScheduleAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateVisitNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ShelterScheduleSerializer(schedule).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', None)
        serializer = ScheduleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            schedule = update_schedule(
                schedule_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except (ScheduleNotFoundError, TeamNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ScheduleAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateVisitNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ShelterScheduleSerializer(schedule).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_schedule(schedule_id=self.kwargs['pk'], user=request.user)
        except ScheduleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ScheduleAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for calendar events.

    list: Events visible to the user's role (?upcoming=true)
    create/update/destroy: Admin only
    """

    serializer_class = EventSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SchedulePagination

    def get_queryset(self):
        filters = EventFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_events_for_user(
            user=self.request.user,
            upcoming_only=filters.validated_data['upcoming'],
        )

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    def create(self, request, *args, **kwargs):
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        event = create_event(**serializer.validated_data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = EventWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            event = update_event(event_id=self.kwargs['pk'], **serializer.validated_data)
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(EventSerializer(event).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_event(event_id=self.kwargs['pk'])
        except EventNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
