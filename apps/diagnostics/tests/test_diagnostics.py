import json
import uuid
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.core.management import call_command
from django.urls import reverse
from rest_framework import status

from apps.accounts.models import User
from apps.appointments.models import Appointment
from apps.audit.buffer import get_audit_log
from apps.billing.models import Charge
from apps.core.exceptions import DataLoadFailedError
from apps.diagnostics.models import CrashReport, CrashType
from apps.diagnostics.services import (
    AppUpdateChecker,
    compare_versions,
    export_backup,
    log_crash,
    resolve_crash,
    restore_backup,
)
from apps.loyalty.models import LoyaltyProgram, RewardPool
from apps.owners.models import Dog, DogOwner
from apps.tags.models import Tag


def _response(payload=None, text='', status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def _session(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return session


# =============================================================================
# Crash Report Tests
# =============================================================================

@pytest.mark.django_db
class TestCrashReports:

    def test_log_crash(self, settings):
        settings.FURFOLIO_APP_VERSION = '2.3.0'

        report = log_crash(message='Null dog on calendar', device_info='iPad', actor='groomer@example.com')

        assert report.app_version == '2.3.0'
        assert report.resolved is False
        entry = get_audit_log('crash_report').last()
        assert entry.event == 'crash_logged'
        assert entry.escalate is False

    def test_fatal_errors_are_escalated(self):
        log_crash(message='Store corrupted', report_type=CrashType.DATA_CORRUPTION)

        assert get_audit_log('crash_report').last().escalate is True

    def test_resolve_once(self):
        report = log_crash(message='Boom')

        resolve_crash(report_id=report.id)
        resolve_crash(report_id=report.id)

        assert CrashReport.objects.get(id=report.id).resolved is True
        events = [e.event for e in get_audit_log('crash_report').all()]
        assert events == ['crash_logged', 'crash_resolved']

    def test_summary(self):
        report = log_crash(message='Boom')

        assert report.summary.startswith('Crash on ')
        assert report.summary.endswith('(open): Boom')


@pytest.mark.django_db
class TestCrashReportApi:
    """Tests for /api/diagnostics/crashes/"""

    def test_any_staff_can_file(self, authenticated_client):
        response = authenticated_client.post(
            reverse('diagnostics:crash-list'),
            {'message': 'App froze', 'report_type': 'fatal_error', 'device_model': 'iPad Pro'},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['resolved'] is False
        assert get_audit_log('crash_report').last().actor == 'groomer@example.com'

    def test_listing_requires_admin(self, authenticated_client):
        response = authenticated_client.get(reverse('diagnostics:crash-list'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_and_resolve(self, admin_client):
        open_report = log_crash(message='Open')
        done = log_crash(message='Done')
        resolve_crash(report_id=done.id)

        response = admin_client.get(reverse('diagnostics:crash-list'), {'resolved': 'false'})
        assert [r['id'] for r in response.data['results']] == [str(open_report.id)]

        response = admin_client.post(reverse('diagnostics:crash-resolve', args=[open_report.id]))
        assert response.data['resolved'] is True


# =============================================================================
# Update Checker Tests
# =============================================================================

class TestVersions:

    @pytest.mark.parametrize('left, right, expected', [
        ('1.2.0', '1.2.0', 0),
        ('1.2', '1.2.0', 0),
        ('1.10.0', '1.9.9', 1),
        ('2.0.0', '10.0.0', -1),
        ('v1.3', '1.2.9', 1),
    ])
    def test_compare_versions(self, left, right, expected):
        assert compare_versions(left, right) == expected


class TestAppUpdateChecker:

    def test_update_available(self, settings):
        settings.FURFOLIO_UPDATE_TIMEOUT = 3
        session = _session(_response({'latest_version': '1.2.0', 'mandatory_update': True}))

        result = AppUpdateChecker(current_version='1.1.9', session=session).check_for_updates()

        assert result.update_available is True
        assert result.mandatory_update is True
        assert result.latest_version == '1.2.0'
        assert result.error is None
        session.get.assert_called_once_with(settings.FURFOLIO_UPDATE_VERSION_URL, timeout=3)
        last = get_audit_log('app_update').last()
        assert last.event == 'update_check_completed'
        assert last.escalate is True

    def test_up_to_date(self):
        session = _session(_response({'latest_version': '1.0.0'}))

        result = AppUpdateChecker(current_version='1.0.0', session=session).check_for_updates()

        assert result.update_available is False
        assert result.mandatory_update is False

    @pytest.mark.parametrize('session', [
        _session(error=requests.ConnectionError('offline')),
        _session(error=requests.Timeout('slow')),
        _session(_response(status_code=503)),
        _session(_response({'version': '1.0'})),
        _session(_response({'latest_version': 7})),
    ])
    def test_failures_report_no_update(self, session):
        checker = AppUpdateChecker(current_version='1.0.0', session=session)

        result = checker.check_for_updates()

        assert result.update_available is False
        assert result.error
        events = [e.event for e in checker.recent_events()]
        assert events == ['update_check_started', 'update_check_failed']
        assert checker.recent_events()[-1].escalate is True

    def test_invalid_json(self):
        response = _response()
        response.json.side_effect = ValueError('not json')

        result = AppUpdateChecker(current_version='1.0.0', session=_session(response)).check_for_updates()

        assert result.error == 'not json'

    def test_changelog(self):
        checker = AppUpdateChecker(session=_session(_response(text='## 1.2.0\n- Faster calendar')))

        assert checker.fetch_changelog() == '## 1.2.0\n- Faster calendar'
        assert get_audit_log('app_update').last().payload['length'] == 26

    def test_changelog_failure(self):
        checker = AppUpdateChecker(session=_session(error=requests.ConnectionError('offline')))

        assert checker.fetch_changelog() is None
        assert get_audit_log('app_update').last().event == 'changelog_fetch_failed'

    def test_default_session_uses_requests(self):
        with patch('apps.diagnostics.services.updates.requests.Session') as session_cls:
            session_cls.return_value.get.return_value = _response({'latest_version': '99.0.0'})

            result = AppUpdateChecker(current_version='1.0.0').check_for_updates()

        assert result.update_available is True


@pytest.mark.django_db
class TestUpdateApi:

    def test_check_updates(self, admin_client):
        with patch('apps.diagnostics.services.updates.requests.Session') as session_cls:
            session_cls.return_value.get.return_value = _response({'latest_version': '9.9.9'})

            response = admin_client.get(reverse('diagnostics:update-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['update_available'] is True
        assert response.data['latest_version'] == '9.9.9'

    def test_changelog_offline(self, admin_client):
        with patch('apps.diagnostics.services.updates.requests.Session') as session_cls:
            session_cls.return_value.get.side_effect = requests.ConnectionError('offline')

            response = admin_client.get(reverse('diagnostics:changelog'))

        assert response.data == {'changelog': None}

    def test_requires_admin(self, authenticated_client):
        response = authenticated_client.get(reverse('diagnostics:update-check'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Backup Tests
# =============================================================================

@pytest.mark.django_db
class TestBackup:

    def test_round_trip(self, owner, dog, staff_user):
        tag = Tag.objects.create(label='VIP')
        owner.tags.add(tag)
        Charge.objects.create(owner=owner, dog=dog, amount='45.00', processed_by=staff_user)
        RewardPool.objects.create(name='Bonus', total_points=10).participants.add(owner)

        data = export_backup(actor='boss@example.com')

        DogOwner.objects.all().delete()
        Tag.objects.all().delete()
        RewardPool.objects.all().delete()
        assert not Charge.objects.exists()

        restored = restore_backup(data, actor='boss@example.com')

        assert restored == len(json.loads(data))
        owner = DogOwner.objects.get(owner_name='Maria Lopez')
        assert list(owner.tags.values_list('label', flat=True)) == ['VIP']
        assert Dog.objects.get().name == 'Biscuit'
        assert Charge.objects.get().processed_by == staff_user
        assert RewardPool.objects.get().participants.get() == owner
        assert get_audit_log('admin_panel').last().event == 'backup_restored'

    def test_users_are_not_exported(self, owner, staff_user):
        data = json.loads(export_backup())

        assert {item['model'] for item in data} == {'owners.dogowner'}

    @pytest.mark.parametrize('data', [
        'not json',
        '[{"model": "owners.nothing", "pk": 1, "fields": {}}]',
    ])
    def test_malformed_backup(self, data):
        with pytest.raises(DataLoadFailedError):
            restore_backup(data)

        assert get_audit_log('admin_panel').last().event == 'backup_restore_failed'

    @pytest.mark.django_db(transaction=True)
    def test_dangling_reference_fails_whole_restore(self):
        data = json.dumps([
            {
                'model': 'owners.dog',
                'pk': str(uuid.uuid4()),
                'fields': {
                    'owner': str(uuid.uuid4()),
                    'name': 'Ghost',
                    'breed': '',
                    'birthdate': None,
                    'color': '',
                    'gender': 'unknown',
                    'notes': '',
                    'is_active': True,
                    'tags': [],
                    'date_added': '2024-05-01T09:00:00Z',
                    'last_modified': '2024-05-01T09:00:00Z',
                    'last_modified_by': None,
                },
            },
        ])

        with pytest.raises(DataLoadFailedError):
            restore_backup(data, actor='boss@example.com')

        assert not Dog.objects.exists()
        entry = get_audit_log('admin_panel').last()
        assert entry.event == 'backup_restore_failed'
        assert entry.escalate is True

    def test_export_endpoint(self, admin_client, owner):
        response = admin_client.get(reverse('diagnostics:backup-export'))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Disposition'].startswith('attachment; filename="furfolio_backup_')
        assert json.loads(response.content)[0]['fields']['owner_name'] == 'Maria Lopez'

    def test_restore_endpoint_malformed(self, admin_client):
        response = admin_client.post(reverse('diagnostics:backup-restore'), {'data': '{broken'})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error']['code'] == 'data_load_failed'

    def test_restore_requires_admin(self, authenticated_client):
        response = authenticated_client.post(reverse('diagnostics:backup-restore'), {'data': '[]'})

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Demo Data Command
# =============================================================================

@pytest.mark.django_db
class TestSeedDemoData:

    def test_seed(self):
        call_command('seed_demo_data', '--seed', '7')

        assert User.objects.filter(email='owner@furfolio.example').exists()
        assert DogOwner.objects.count() == 6
        assert Dog.objects.count() == 8
        assert Appointment.objects.filter(status='scheduled').count() == 6
        assert LoyaltyProgram.objects.filter(visit_count__gt=0).exists()
        assert RewardPool.objects.get().total_points == 1000

    def test_clear_and_reseed(self):
        call_command('seed_demo_data')
        call_command('seed_demo_data', '--clear')

        assert DogOwner.objects.count() == 6
        assert Tag.objects.count() == 5
