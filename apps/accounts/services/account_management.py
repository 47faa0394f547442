"""Profile and role management."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import (
    InvalidCredentialsError,
    InvalidRoleError,
    UserNotFoundError,
)
from .user_registration import ensure_role_profile

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str) -> User:
    """
    Change password after checking the current one.

    Raises:
        InvalidCredentialsError: If current password is wrong
    """
    if not user.check_password(current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    user.set_password(new_password)
    user.save(update_fields=['password'])
    return user


@transaction.atomic
def update_own_profile(
    *,
    user: User,
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> User:
    """Update name and phone. A profile with both set counts as completed."""
    update_fields = []
    if name is not None:
        user.name = name
        update_fields.append('name')
    if phone is not None:
        user.phone = phone
        update_fields.append('phone')

    completed = bool(user.name and user.phone)
    if completed != user.completed:
        user.completed = completed
        update_fields.append('completed')

    if update_fields:
        update_fields.append('updated_at')
        user.save(update_fields=update_fields)
    return user


@transaction.atomic
def set_user_role(*, user_id: UUID, role: str, changed_by: User) -> User:
    """
    Change a user's role (admin only).

    Creates the leader or member profile the new role needs. Existing
    profiles are kept so team history survives a role switch.

    Raises:
        InvalidRoleError: If role is unknown or the caller is not an admin,
            or an admin tries to demote themself
        UserNotFoundError: If user does not exist
    """
    if changed_by.role != UserRole.ADMIN:
        raise InvalidRoleError("Only admins can change roles")
    if role not in UserRole.values:
        raise InvalidRoleError(f"Unknown role: {role}")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    if user.pk == changed_by.pk and role != UserRole.ADMIN:
        raise InvalidRoleError("Admins cannot remove their own admin role")

    previous = user.role
    user.role = role
    user.save(update_fields=['role', 'updated_at'])
    ensure_role_profile(user)

    logger.info("User %s role changed %s -> %s by %s", user.id, previous, role, changed_by.id)
    return user
