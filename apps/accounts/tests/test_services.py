"""
Service layer tests for the accounts app.

Tests cover:
- Registration and role profiles
- Authentication
- Password reset flow and its e-mails
- Profile and role management
"""

import pytest
from uuid import uuid4

from django.core import mail

from apps.accounts.models import User, UserRole
from apps.accounts.services import (
    register_user,
    authenticate_user,
    change_password,
    update_own_profile,
    set_user_role,
    request_password_reset,
    confirm_password_reset,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    InvalidRoleError,
)
from apps.shelters.models import LeaderProfile, MemberProfile


@pytest.mark.django_db
class TestRegisterUser:

    def test_member_gets_member_profile(self):
        user = register_user(email='new@example.com', password='TestPass123!', name='New')

        assert user.role == UserRole.MEMBER
        assert MemberProfile.objects.filter(user=user).exists()
        assert not LeaderProfile.objects.filter(user=user).exists()

    def test_leader_gets_leader_profile(self):
        user = register_user(email='lead@example.com', password='TestPass123!', role=UserRole.LEADER)

        assert LeaderProfile.objects.filter(user=user).exists()

    def test_duplicate_email_case_insensitive(self, member_user):
        with pytest.raises(UserRegistrationError):
            register_user(email='MEMBER@example.com', password='TestPass123!')

    def test_admin_role_rejected(self):
        with pytest.raises(UserRegistrationError):
            register_user(email='boss@example.com', password='TestPass123!', role=UserRole.ADMIN)


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_success_sets_last_login(self, member_user):
        user = authenticate_user(email='member@example.com', password='TestPass123!')

        assert user == member_user
        assert user.last_login is not None

    def test_wrong_password(self, member_user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='member@example.com', password='nope')

    def test_unknown_email(self):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='ghost@example.com', password='TestPass123!')

    def test_inactive(self, inactive_user):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email='inactive@example.com', password='TestPass123!')


@pytest.mark.django_db
class TestPasswordReset:

    def test_request_sets_token_and_mails_link(self, member_user, settings, django_capture_on_commit_callbacks):
        settings.FRONTEND_URL = 'https://visits.example.com/'

        with django_capture_on_commit_callbacks(execute=True):
            token = request_password_reset(email='member@example.com')

        member_user.refresh_from_db()
        assert member_user.password_reset_token == token
        assert member_user.reset_token_is_valid()
        assert len(mail.outbox) == 1
        assert f'https://visits.example.com/reset-password/{token}' in mail.outbox[0].body

    def test_request_unknown_email(self):
        with pytest.raises(UserNotFoundError):
            request_password_reset(email='ghost@example.com')

    def test_confirm_changes_password(self, user_with_reset_token, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            user = confirm_password_reset(token='valid-reset-token-12345', new_password='BrandNew456!')

        assert user.check_password('BrandNew456!')
        assert user.password_reset_token is None
        assert mail.outbox[0].subject == 'Your password was changed'

    def test_confirm_expired_token(self, user_with_expired_token):
        with pytest.raises(InvalidTokenError):
            confirm_password_reset(token='expired-reset-token', new_password='BrandNew456!')

    def test_confirm_unknown_token(self, db):
        with pytest.raises(InvalidTokenError):
            confirm_password_reset(token='nope', new_password='BrandNew456!')


@pytest.mark.django_db
class TestAccountManagement:

    def test_change_password_wrong_current(self, member_user):
        with pytest.raises(InvalidCredentialsError):
            change_password(user=member_user, current_password='wrong', new_password='BrandNew456!')

    def test_profile_completed_when_name_and_phone(self, db):
        user = User.objects.create_user(email='bare@example.com', password='TestPass123!')

        update_own_profile(user=user, name='Bea')
        assert user.completed is False

        update_own_profile(user=user, phone='+5511988887777')
        assert user.completed is True

    def test_promote_member_to_leader(self, admin_user, member_user):
        user = set_user_role(user_id=member_user.id, role=UserRole.LEADER, changed_by=admin_user)

        assert user.role == UserRole.LEADER
        assert LeaderProfile.objects.filter(user=member_user).exists()
        assert MemberProfile.objects.filter(user=member_user).exists()

    def test_non_admin_cannot_change_roles(self, leader_user, member_user):
        with pytest.raises(InvalidRoleError):
            set_user_role(user_id=member_user.id, role=UserRole.LEADER, changed_by=leader_user)

    def test_admin_cannot_demote_self(self, admin_user):
        with pytest.raises(InvalidRoleError):
            set_user_role(user_id=admin_user.id, role=UserRole.MEMBER, changed_by=admin_user)

    def test_unknown_user(self, admin_user):
        with pytest.raises(UserNotFoundError):
            set_user_role(user_id=uuid4(), role=UserRole.LEADER, changed_by=admin_user)
