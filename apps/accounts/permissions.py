from rest_framework import permissions

from .models import UserRole


class IsAdmin(permissions.BasePermission):
    """
    Permission: User must have the admin role.
    """

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == UserRole.ADMIN)


class IsAdminOrLeader(permissions.BasePermission):
    """
    Permission: User must be an admin or a team leader.
    """

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and user.role in (UserRole.ADMIN, UserRole.LEADER)
        )
