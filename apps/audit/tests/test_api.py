import json

import pytest
from django.urls import reverse
from rest_framework import status

from apps.audit.buffer import get_audit_log


@pytest.mark.django_db
class TestAuditLogApi:
    """Tests for /api/audit/logs/"""

    def test_list_logs(self, admin_client):
        response = admin_client.get(reverse('audit:log-list'))

        assert response.status_code == status.HTTP_200_OK
        names = {log['name'] for log in response.data}
        assert {'tag', 'charge', 'appointment'} <= names

    def test_requires_admin_role(self, authenticated_client):
        response = authenticated_client.get(reverse('audit:log-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_recent_entries(self, admin_client):
        log = get_audit_log('tag')
        for i in range(5):
            log.record('create', n=i)

        response = admin_client.get(reverse('audit:log-recent', args=['tag']), {'limit': 2})

        assert response.status_code == status.HTTP_200_OK
        assert [e['payload']['n'] for e in response.data] == [3, 4]

    def test_unknown_log(self, admin_client):
        response = admin_client.get(reverse('audit:log-recent', args=['nope']))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_export(self, admin_client):
        get_audit_log('charge').record('create', amount='10.00')

        response = admin_client.get(reverse('audit:log-export', args=['charge']))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Disposition'] == 'attachment; filename="charge_audit.json"'
        assert json.loads(response.content)[0]['event'] == 'create'
        assert get_audit_log('admin_panel').last().event == 'audit_exported'

    def test_clear(self, admin_client):
        get_audit_log('charge').record('create')

        response = admin_client.post(reverse('audit:log-clear', args=['charge']))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert len(get_audit_log('charge')) == 0
        cleared = get_audit_log('admin_panel').last()
        assert cleared.event == 'audit_cleared'
        assert cleared.escalate is True
        assert cleared.payload['dropped'] == 1
