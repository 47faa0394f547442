"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


def ensure_role_profile(user) -> None:
    """Create the team profile the user's role needs, if missing."""
    from apps.shelters.models import LeaderProfile, MemberProfile

    if user.role == UserRole.LEADER:
        LeaderProfile.objects.get_or_create(user=user)
    elif user.role == UserRole.MEMBER:
        MemberProfile.objects.get_or_create(user=user)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str = "",
    phone: str = "",
    role: str = UserRole.MEMBER,
) -> User:
    """
    Register a new user and the profile matching their role.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        name: Full name
        phone: Phone number
        role: leader or member (admin accounts are promoted, not registered)

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the e-mail is taken or the role is not allowed
    """
    if role not in (UserRole.LEADER, UserRole.MEMBER):
        raise UserRegistrationError(f"Cannot register with role: {role}")

    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            phone=phone,
            role=role,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    ensure_role_profile(user)
    logger.info("Registered user %s with role %s", user.id, role)
    return user
