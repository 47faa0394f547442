import pytest
from datetime import timedelta
from django.utils import timezone

from apps.accounts.models import User


@pytest.fixture
def inactive_user(db):
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def user_with_reset_token(member_user):
    """Member holding a reset token that is still valid."""
    member_user.password_reset_token = 'valid-reset-token-12345'
    member_user.password_reset_expires_at = timezone.now() + timedelta(minutes=30)
    member_user.save()
    return member_user


@pytest.fixture
def user_with_expired_token(member_user):
    member_user.password_reset_token = 'expired-reset-token'
    member_user.password_reset_expires_at = timezone.now() - timedelta(minutes=1)
    member_user.save()
    return member_user
