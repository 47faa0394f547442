from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ContactViewSet

app_name = 'communication'

router = SimpleRouter()
router.register(r'', ContactViewSet, basename='contact')

urlpatterns = [
    # POST   /api/contacts/              - Public contact form
    # GET    /api/contacts/              - Admin listing (?unread=true)
    # PATCH  /api/contacts/{id}/read/    - Mark as read
    # DELETE /api/contacts/{id}/         - Delete
    path('', include(router.urls)),
]
