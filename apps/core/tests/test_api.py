import pytest
from django.urls import reverse
from rest_framework import status

from apps.audit.buffer import get_audit_log


# =============================================================================
# Error Handler Tests
# =============================================================================

@pytest.mark.django_db
class TestErrorHandler:
    """AppErrors raised in views are rendered and recorded."""

    def test_app_error_rendered_as_payload(self, authenticated_client, owner):
        url = reverse('loyalty:redeem', args=[owner.id])
        response = authenticated_client.post(url, {'reward_type': 'free_bath'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.data['error']
        assert error['code'] == 'invalid_input'
        assert error['is_recoverable'] is True
        assert error['description'].startswith('Invalid input.\n')

    def test_app_error_recorded_in_audit_log(self, authenticated_client, owner):
        url = reverse('loyalty:redeem', args=[owner.id])
        authenticated_client.post(url, {'reward_type': 'free_bath'}, format='json')

        entry = get_audit_log('app_error').last()
        assert entry.event == 'invalid_input'
        assert entry.actor == 'groomer@example.com'
        assert entry.escalate is False

    def test_validation_errors_use_default_handler(self, authenticated_client):
        url = reverse('owners:owner-list')
        response = authenticated_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'owner_name' in response.data


# =============================================================================
# Permission Tests
# =============================================================================

@pytest.mark.django_db
class TestEnabledUserPermission:

    def test_suspended_user_rejected(self, authenticated_client, staff_user):
        staff_user.is_suspended = True
        staff_user.save()

        response = authenticated_client.get(reverse('owners:owner-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated_rejected(self, api_client):
        response = api_client.get(reverse('owners:owner-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Plain HTTP Tests
# =============================================================================

@pytest.mark.django_db
class TestPlainHttp:

    def test_requests_are_not_redirected_to_https(self, api_client, settings):
        response = api_client.get(reverse('health-check'))

        assert settings.SECURE_SSL_REDIRECT is False
        assert response.status_code == status.HTTP_200_OK
