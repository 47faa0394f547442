from rest_framework import permissions

from apps.accounts.models import UserRole


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Permission: Any authenticated user may read, only admins may write.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.role == UserRole.ADMIN
