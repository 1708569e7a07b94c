"""
Appointment services - Business logic layer.

This package contains all business operations for the appointments app:
- Scheduling with per-dog conflict detection
- Status transitions, notes and cancellation
- Grooming session records
"""

from .scheduling import (
    get_appointment_by_id,
    find_conflicts,
    schedule_appointment,
    update_appointment,
    update_appointment_status,
    cancel_appointment,
    add_appointment_note,
    delete_appointment,
    upcoming_appointments,
)
from .sessions import (
    get_session_by_id,
    log_grooming_session,
    update_grooming_session,
    set_session_badge,
    session_totals,
)
from .exceptions import (
    AppointmentsServiceError,
    AppointmentNotFoundError,
    AppointmentConflictError,
    InvalidStatusTransitionError,
    DogOwnerMismatchError,
    SessionNotFoundError,
)

__all__ = [
    # Appointment services
    'get_appointment_by_id',
    'find_conflicts',
    'schedule_appointment',
    'update_appointment',
    'update_appointment_status',
    'cancel_appointment',
    'add_appointment_note',
    'delete_appointment',
    'upcoming_appointments',
    # Session services
    'get_session_by_id',
    'log_grooming_session',
    'update_grooming_session',
    'set_session_badge',
    'session_totals',
    # Exceptions
    'AppointmentsServiceError',
    'AppointmentNotFoundError',
    'AppointmentConflictError',
    'InvalidStatusTransitionError',
    'DogOwnerMismatchError',
    'SessionNotFoundError',
]
