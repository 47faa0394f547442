from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import VisitReportViewSet

app_name = 'visit_reports'

router = SimpleRouter()
router.register(r'', VisitReportViewSet, basename='visit-report')

urlpatterns = [
    # GET    /api/visit-reports/            - Reports of the user's teams
    # POST   /api/visit-reports/            - File a report for a past visit
    # GET    /api/visit-reports/pending/    - Past visits still without a report
    path('', include(router.urls)),
]
