"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    InvalidRoleError,
)
from .user_registration import register_user, ensure_role_profile
from .user_authentication import authenticate_user
from .password_reset import request_password_reset, confirm_password_reset
from .account_management import change_password, update_own_profile, set_user_role

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'InvalidRoleError',
    # Services
    'register_user',
    'ensure_role_profile',
    'authenticate_user',
    'request_password_reset',
    'confirm_password_reset',
    'change_password',
    'update_own_profile',
    'set_user_role',
]
