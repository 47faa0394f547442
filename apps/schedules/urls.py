from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ShelterScheduleViewSet, EventViewSet

app_name = 'schedules'

router = SimpleRouter()
router.register(r'events', EventViewSet, basename='event')
router.register(r'', ShelterScheduleViewSet, basename='schedule')

urlpatterns = [
    # GET    /api/schedules/            - Schedules visible to the user (?team_id=)
    # POST   /api/schedules/            - Create schedule (admin, leader of team)
    # PATCH  /api/schedules/{id}/       - Update schedule, events follow
    # GET    /api/schedules/events/     - Calendar (?upcoming=true)
    path('', include(router.urls)),
]
