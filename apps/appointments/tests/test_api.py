from datetime import timedelta

import pytest
from django.urls import reverse
from rest_framework import status

from apps.appointments.models import Appointment, AppointmentStatus, GroomingSession, SessionBadge
from apps.loyalty.models import LoyaltyProgram


# =============================================================================
# Appointment API Tests
# =============================================================================

@pytest.mark.django_db
class TestAppointmentCreate:
    """Tests for POST /api/appointments/"""

    def test_create(self, authenticated_client, owner, dog, slot):
        response = authenticated_client.post(
            reverse('appointments:appointment-list'),
            {'owner': str(owner.id), 'dog': str(dog.id), 'date': slot.isoformat(), 'service_type': 'basic_bath'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['duration_minutes'] == 45
        assert response.data['dog_name'] == 'Biscuit'
        assert response.data['is_upcoming'] is True

    def test_conflict(self, authenticated_client, owner, dog, appointment, slot):
        response = authenticated_client.post(
            reverse('appointments:appointment-list'),
            {'owner': str(owner.id), 'dog': str(dog.id), 'date': (slot + timedelta(minutes=30)).isoformat()},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'duplicate_entry'
        assert Appointment.objects.count() == 1

    def test_dog_of_another_owner(self, authenticated_client, other_owner, dog, slot):
        response = authenticated_client.post(
            reverse('appointments:appointment-list'),
            {'owner': str(other_owner.id), 'dog': str(dog.id), 'date': slot.isoformat()},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'dog' in response.data

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('appointments:appointment-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestAppointmentActions:

    def test_filter_by_status(self, authenticated_client, appointment, owner, dog, slot):
        Appointment.objects.create(
            owner=owner, dog=dog, date=slot + timedelta(days=3), status=AppointmentStatus.CANCELLED,
        )

        response = authenticated_client.get(reverse('appointments:appointment-list'), {'status': 'scheduled'})

        assert [a['id'] for a in response.data['results']] == [str(appointment.id)]

    def test_complete_credits_loyalty(self, authenticated_client, appointment):
        url = reverse('appointments:appointment-set-status', args=[appointment.id])
        response = authenticated_client.post(url, {'status': 'completed'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'
        assert LoyaltyProgram.objects.get(owner=appointment.owner).points == 10

    def test_reopen_completed_is_rejected(self, authenticated_client, appointment):
        url = reverse('appointments:appointment-set-status', args=[appointment.id])
        authenticated_client.post(url, {'status': 'completed'})

        response = authenticated_client.post(url, {'status': 'scheduled'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'invalid_input'

    def test_notes(self, authenticated_client, appointment):
        url = reverse('appointments:appointment-notes', args=[appointment.id])
        authenticated_client.post(url, {'note': 'Nervous around dryers'})
        response = authenticated_client.post(url, {'note': 'Use low heat'})

        assert response.data['notes'] == 'Nervous around dryers\nUse low heat'

    def test_cancel(self, authenticated_client, appointment):
        url = reverse('appointments:appointment-cancel', args=[appointment.id])
        response = authenticated_client.post(url, {'reason': 'Weather'})

        assert response.data['status'] == 'cancelled'
        assert response.data['notes'] == 'Cancelled: Weather'

    def test_reschedule(self, authenticated_client, appointment, slot):
        url = reverse('appointments:appointment-detail', args=[appointment.id])
        new_date = slot + timedelta(days=1)
        response = authenticated_client.patch(url, {'date': new_date.isoformat()}, format='json')

        assert response.status_code == status.HTTP_200_OK
        appointment.refresh_from_db()
        assert appointment.date == new_date

    def test_audit_log(self, authenticated_client, appointment):
        authenticated_client.post(
            reverse('appointments:appointment-notes', args=[appointment.id]),
            {'note': 'Hello'},
        )

        response = authenticated_client.get(reverse('appointments:appointment-audit-log', args=[appointment.id]))

        entry = response.data['entries'][-1]
        assert entry['action'] == 'note_added'
        assert entry['user'] == 'groomer@example.com'
        assert entry['role'] == 'groomer'

    def test_upcoming(self, authenticated_client, appointment, owner, dog, slot):
        Appointment.objects.create(owner=owner, dog=dog, date=slot + timedelta(days=20))

        response = authenticated_client.get(reverse('appointments:appointment-upcoming'), {'days': 7})

        assert [a['id'] for a in response.data] == [str(appointment.id)]

    def test_delete(self, authenticated_client, appointment):
        response = authenticated_client.delete(reverse('appointments:appointment-detail', args=[appointment.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Appointment.objects.exists()


# =============================================================================
# Grooming Session API Tests
# =============================================================================

@pytest.mark.django_db
class TestGroomingSessionApi:
    """Tests for /api/appointments/sessions/"""

    def test_log_session(self, authenticated_client, dog, appointment):
        response = authenticated_client.post(
            reverse('appointments:session-list'),
            {
                'dog': str(dog.id),
                'appointment': str(appointment.id),
                'duration_minutes': 60,
                'session_cost': '12.50',
                'session_revenue': '65.00',
                'tip': '10.00',
                'rating': 5,
                'products_used': ['oatmeal shampoo'],
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['profit'] == '52.50'
        assert response.data['revenue_per_hour'] == '65.00'
        assert response.data['staff_email'] == 'groomer@example.com'
        assert response.data['badge_tokens'] == [SessionBadge.FIRST_SESSION]

    def test_rating_out_of_range(self, authenticated_client, dog):
        response = authenticated_client.post(
            reverse('appointments:session-list'),
            {'dog': str(dog.id), 'rating': 6},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_and_badges(self, authenticated_client, dog):
        session = GroomingSession.objects.create(dog=dog)

        response = authenticated_client.patch(
            reverse('appointments:session-detail', args=[session.id]),
            {'rating': 1},
            format='json',
        )
        assert response.data['quick_status'] == 'Low Rating'

        response = authenticated_client.post(
            reverse('appointments:session-badges', args=[session.id]),
            {'badge': SessionBadge.INCIDENT},
        )
        assert response.data['quick_status'] == 'Incident'
