import uuid

import pytest
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import User, UserBadge, UserRole
from apps.audit.buffer import get_audit_log


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client, django_capture_on_commit_callbacks):
        """Successfully register a new staff account."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
        }
        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        user = User.objects.get(email='newuser@example.com')
        assert user.role == UserRole.STAFF
        assert UserBadge.ONBOARDING in user.badge_tokens
        assert get_audit_log('user').last().event == 'registered'

    def test_register_without_display_name(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_password_mismatch(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email
        assert response.data['user']['login_streak'] == 1

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password and the failure is recorded."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPassword123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data
        assert get_audit_log('user').last().event == 'login_failed'

    def test_login_nonexistent_user(self, api_client):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'SomePass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_suspended_user(self, api_client, user):
        user.is_suspended = True
        user.save()

        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.last_login is not None


# =============================================================================
# Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_success(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Logout successful'

    def test_logout_invalid_refresh(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': 'garbage'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_unauthenticated(self, api_client):
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestProfile:
    """Tests for GET /api/auth/user/ and PATCH /api/auth/user/update/"""

    def test_get_current_user(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['role'] == UserRole.RECEPTIONIST
        assert response.data['is_enabled'] is True

    def test_get_current_user_unauthenticated(self, api_client):
        response = api_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_display_name(self, authenticated_client, user):
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'display_name': 'Updated Name'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.display_name == 'Updated Name'

    def test_cannot_update_role(self, authenticated_client, user):
        """Role is read-only on the profile endpoint."""
        url = reverse('users:update-profile')
        authenticated_client.patch(url, {'role': UserRole.OWNER})

        user.refresh_from_db()
        assert user.role == UserRole.RECEPTIONIST


# =============================================================================
# Staff Management Tests
# =============================================================================

@pytest.mark.django_db
class TestUserAdmin:
    """Tests for /api/auth/users/"""

    def test_list_requires_admin_role(self, authenticated_client):
        response = authenticated_client.get(reverse('users:user-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_can_list(self, admin_client, other_user):
        response = admin_client.get(reverse('users:user-list'))

        assert response.status_code == status.HTTP_200_OK

    def test_user_not_found(self, admin_client):
        response = admin_client.get(reverse('users:user-detail', args=[uuid.uuid4()]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_suspend_and_enable(self, admin_client, other_user, django_capture_on_commit_callbacks):
        url = reverse('users:user-suspend', args=[other_user.id])
        with django_capture_on_commit_callbacks(execute=True):
            response = admin_client.post(url, {'reason': 'policy'})

        assert response.status_code == status.HTTP_200_OK
        other_user.refresh_from_db()
        assert other_user.is_suspended is True
        assert UserBadge.SUSPENDED in other_user.badge_tokens
        assert get_audit_log('user').last().escalate is True

        response = admin_client.post(reverse('users:user-enable', args=[other_user.id]))

        other_user.refresh_from_db()
        assert other_user.is_enabled is True
        assert UserBadge.SUSPENDED not in other_user.badge_tokens

    def test_change_role(self, admin_client, other_user):
        url = reverse('users:user-role', args=[other_user.id])
        response = admin_client.post(url, {'role': UserRole.GROOMER})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == UserRole.GROOMER

    def test_last_owner_cannot_be_demoted(self, admin_client, admin_user):
        url = reverse('users:user-role', args=[admin_user.id])
        response = admin_client.post(url, {'role': UserRole.GROOMER})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_input'
        admin_user.refresh_from_db()
        assert admin_user.role == UserRole.OWNER

    def test_add_badge_twice_is_noop(self, admin_client, other_user):
        url = reverse('users:user-badges', args=[other_user.id])
        admin_client.post(url, {'badge': UserBadge.TRUSTED})
        response = admin_client.post(url, {'badge': UserBadge.TRUSTED})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['badge_tokens'].count(UserBadge.TRUSTED) == 1

    def test_unknown_badge_rejected(self, admin_client, other_user):
        url = reverse('users:user-badges', args=[other_user.id])
        response = admin_client.post(url, {'badge': 'wizard'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
