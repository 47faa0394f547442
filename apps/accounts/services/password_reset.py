"""Password reset service."""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.communication.services import send_templated_email
from .exceptions import UserNotFoundError, InvalidTokenError

User = get_user_model()
logger = logging.getLogger(__name__)


def build_reset_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password/{token}"


def _send_reset_email(user, token: str) -> None:
    send_templated_email(
        to=[user.email],
        subject='Password reset',
        template='password_reset',
        context={
            'name': user.get_display_name(),
            'reset_link': build_reset_link(token),
            'expires_minutes': settings.PASSWORD_RESET_TIMEOUT_MINUTES,
        },
    )


def _send_password_changed_email(user) -> None:
    send_templated_email(
        to=[user.email],
        subject='Your password was changed',
        template='password_changed',
        context={'name': user.get_display_name()},
    )


@transaction.atomic
def request_password_reset(*, email: str) -> str:
    """
    Generate a password reset token and e-mail the reset link.

    The e-mail goes out after the transaction commits.

    Args:
        email: User's email address

    Returns:
        Reset token

    Raises:
        UserNotFoundError: If no active user has this e-mail
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email, is_active=True)
        )
    except User.DoesNotExist:
        raise UserNotFoundError(f"No active user with email: {email}")

    reset_token = secrets.token_urlsafe(32)
    user.password_reset_token = reset_token
    user.password_reset_expires_at = timezone.now() + timedelta(
        minutes=settings.PASSWORD_RESET_TIMEOUT_MINUTES
    )
    user.save(update_fields=['password_reset_token', 'password_reset_expires_at'])

    transaction.on_commit(lambda: _send_reset_email(user, reset_token))
    logger.info("Password reset requested for user %s", user.id)

    return reset_token


@transaction.atomic
def confirm_password_reset(*, token: str, new_password: str) -> User:
    """
    Reset user password with token.

    Raises:
        InvalidTokenError: If token is invalid or expired
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(password_reset_token=token, is_active=True)
        )
    except User.DoesNotExist:
        raise InvalidTokenError("Invalid or expired reset token")

    if not user.reset_token_is_valid():
        raise InvalidTokenError("Invalid or expired reset token")

    user.set_password(new_password)
    user.password_reset_token = None
    user.password_reset_expires_at = None
    user.save(update_fields=['password', 'password_reset_token', 'password_reset_expires_at'])

    transaction.on_commit(lambda: _send_password_changed_email(user))
    logger.info("Password reset completed for user %s", user.id)

    return user
