from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdminOrLeader
from .serializers import (
    VisitReportSerializer,
    VisitReportCreateSerializer,
    VisitReportUpdateSerializer,
    VisitReportFilterSerializer,
    PendingVisitReportSerializer,
)
from .services import (
    get_visit_report,
    create_visit_report,
    update_visit_report,
    delete_visit_report,
    list_visit_reports_for_user,
    find_pending_visit_reports,
    # Exceptions
    VisitReportNotFoundError,
    ScheduleNotFoundError,
    VisitNotHappenedError,
    DuplicateVisitReportError,
    ReportAccessError,
)


class VisitReportViewSet(viewsets.ModelViewSet):
    """
    ViewSet for visit reports. Admins and leaders only.

    list: ?schedule_id= / ?team_id= / ?shelter_id=
    pending: Past visits of the user's teams without a report
    """

    serializer_class = VisitReportSerializer
    permission_classes = [IsAuthenticated, IsAdminOrLeader]
    pagination_class = None

    def get_queryset(self):
        filters = VisitReportFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        return list_visit_reports_for_user(user=self.request.user, **filters.validated_data)

    def retrieve(self, request, *args, **kwargs):
        try:
            report = get_visit_report(report_id=self.kwargs['pk'], user=request.user)
        except VisitReportNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(VisitReportSerializer(report).data)

    @extend_schema(request=VisitReportCreateSerializer, responses={201: VisitReportSerializer})
    def create(self, request, *args, **kwargs):
        serializer = VisitReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            report = create_visit_report(
                user=request.user,
                today=timezone.localdate(),
                **serializer.validated_data
            )
        except ScheduleNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except VisitNotHappenedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ReportAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateVisitReportError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(VisitReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=VisitReportUpdateSerializer, responses={200: VisitReportSerializer})
    def update(self, request, *args, **kwargs):
        kwargs.pop('partial', None)
        serializer = VisitReportUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            report = update_visit_report(
                report_id=self.kwargs['pk'],
                user=request.user,
                **serializer.validated_data
            )
        except VisitReportNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ReportAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(VisitReportSerializer(report).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_visit_report(report_id=self.kwargs['pk'], user=request.user)
        except VisitReportNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ReportAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: PendingVisitReportSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def pending(self, request):
        """GET /api/visit-reports/pending/"""
        schedules = find_pending_visit_reports(user=request.user, today=timezone.localdate())
        return Response(PendingVisitReportSerializer(schedules, many=True).data)
