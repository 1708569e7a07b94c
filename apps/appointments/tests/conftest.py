from datetime import timedelta

import pytest
from django.utils import timezone

from apps.appointments.models import Appointment, ServiceType


@pytest.fixture
def slot():
    """A start time two days out, on the hour."""
    return (timezone.now() + timedelta(days=2)).replace(minute=0, second=0, microsecond=0)


@pytest.fixture
def appointment(owner, dog, slot):
    return Appointment.objects.create(
        owner=owner,
        dog=dog,
        date=slot,
        duration_minutes=90,
        service_type=ServiceType.FULL_GROOM,
    )
