import pytest
from django.urls import reverse
from rest_framework import status

from apps.audit.buffer import get_audit_log
from apps.owners.models import DogOwner


# =============================================================================
# Revenue Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestRevenueEndpoints:
    """Tests for /api/analytics/revenue/..."""

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('analytics:total-revenue'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_total_revenue(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:total-revenue'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == '290.00'
        assert response.data['start'] is None

    def test_total_revenue_exclude(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:total-revenue'), {'exclude': 'product,basic_bath'})

        assert response.data['total'] == '220.00'

    def test_unknown_excluded_type(self, authenticated_client):
        response = authenticated_client.get(reverse('analytics:total-revenue'), {'exclude': 'spa_day'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'exclude' in response.data

    def test_inverted_range(self, authenticated_client):
        response = authenticated_client.get(
            reverse('analytics:total-revenue'),
            {'start': '2024-05-10T00:00:00Z', 'end': '2024-05-01T00:00:00Z'},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_input'

    def test_daily_revenue(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:daily-revenue'), {'days': 3})

        assert len(response.data) == 3
        assert response.data[-1]['total'] == '160.00'
        assert response.data[0]['total'] == '0.00'

    def test_by_service(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:revenue-by-service'))

        assert response.data[0]['service'] == 'full_groom'

    def test_top_clients(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:top-clients'), {'top_n': 1})

        assert len(response.data) == 1
        assert response.data[0]['owner_name'] == 'Maria Lopez'
        assert response.data[0]['total'] == '250.00'

    def test_goal_progress(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:goal-progress'), {'goal': '100'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['progress'] == 1.0

    def test_zero_goal(self, authenticated_client):
        response = authenticated_client.get(reverse('analytics:goal-progress'), {'goal': '0'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_input'

    def test_growth(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:revenue-growth'))

        assert response.data['days'] == 30
        assert response.data['growth_percent'] == pytest.approx(90.0)

    def test_dashboard(self, authenticated_client, revenue_data):
        response = authenticated_client.get(reverse('analytics:dashboard'), {'goal': '1000'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['outstanding']['count'] == 1
        assert response.data['goal'] is not None


# =============================================================================
# Projection Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestProjectionEndpoint:
    """Tests for POST /api/analytics/projection/"""

    def test_projection(self, authenticated_client):
        response = authenticated_client.post(
            reverse('analytics:projection'),
            {'initial': '1000.00', 'annual_return_pct': '5', 'years': 2},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['values'] == ['1000.00', '1050.00', '1102.50']

    def test_negative_years(self, authenticated_client):
        response = authenticated_client.post(
            reverse('analytics:projection'),
            {'initial': '1000.00', 'annual_return_pct': '5', 'years': -1},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_input'

    def test_too_many_years(self, authenticated_client):
        response = authenticated_client.post(
            reverse('analytics:projection'),
            {'initial': '1000.00', 'annual_return_pct': '5', 'years': 51},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Export Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestExportEndpoint:
    """Tests for GET /api/analytics/export/{entity}/"""

    def test_export_owners(self, admin_client, owner, dog):
        response = admin_client.get(reverse('analytics:export', args=['owners']), {'filename': 'clients'})

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'text/csv'
        assert response['Content-Disposition'] == 'attachment; filename="clients.csv"'
        lines = response.content.decode().splitlines()
        assert lines[0] == 'Owner Name,Email,Phone,Address,Number of Dogs,Last Appointment'
        assert lines[1].startswith('Maria Lopez,')
        assert get_audit_log('export').last().actor == 'boss@example.com'

    def test_default_filename(self, admin_client, revenue_data):
        response = admin_client.get(reverse('analytics:export', args=['charges']))

        assert response['Content-Disposition'] == 'attachment; filename="furfolio_charges.csv"'
        assert len(response.content.decode().splitlines()) == 5

    def test_unknown_entity(self, admin_client):
        response = admin_client.get(reverse('analytics:export', args=['invoices']))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_admin_role(self, authenticated_client):
        response = authenticated_client.get(reverse('analytics:export', args=['owners']))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_write_failure(self, admin_client, owner, settings, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('x')
        settings.FURFOLIO_EXPORT_DIR = blocker

        response = admin_client.get(reverse('analytics:export', args=['owners']), {'save': 'true'})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error']['code'] == 'save_failed'
        assert DogOwner.objects.count() == 1
