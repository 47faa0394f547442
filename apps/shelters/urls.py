from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import (
    ShelterViewSet,
    TeamViewSet,
    LeaderProfileViewSet,
    MemberProfileViewSet,
    my_shelters,
)

app_name = 'shelters'

# Nested prefixes first, the shelter routes own the empty prefix
router = SimpleRouter()
router.register(r'teams', TeamViewSet, basename='team')
router.register(r'leaders', LeaderProfileViewSet, basename='leader')
router.register(r'members', MemberProfileViewSet, basename='member')
router.register(r'', ShelterViewSet, basename='shelter')

urlpatterns = [
    # GET    /api/shelters/                          - List shelters (?search=)
    # POST   /api/shelters/                          - Create shelter (admin)
    # GET    /api/shelters/{id}/teams/               - Teams of a shelter
    # GET    /api/shelters/teams/                    - Teams visible to the user
    # POST   /api/shelters/leaders/{id}/assign_team/ - Link leader to team (admin)
    # POST   /api/shelters/members/{id}/assign_team/ - Move member to team
    path('mine/', my_shelters, name='my-shelters'),

    path('', include(router.urls)),
]
