"""Appointment scheduling and lifecycle service."""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.audit.buffer import record_on_commit, should_escalate
from apps.loyalty.services import award_points
from apps.owners.services import get_owner_by_id, get_dog_by_id
from ..models import (
    Appointment,
    AppointmentStatus,
    AuditAction,
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    estimated_duration,
)
from .exceptions import (
    AppointmentNotFoundError,
    AppointmentConflictError,
    InvalidStatusTransitionError,
    DogOwnerMismatchError,
)

logger = logging.getLogger(__name__)


def _record(action: str, appointment: Appointment, user=None, **payload) -> None:
    record_on_commit(
        'appointment',
        action,
        actor=user.email if user is not None else None,
        escalate=should_escalate(action),
        appointment_id=str(appointment.id),
        dog_id=str(appointment.dog_id),
        status=appointment.status,
        **payload,
    )


def get_appointment_by_id(*, appointment_id: UUID) -> Appointment:
    try:
        return Appointment.objects.select_related('owner', 'dog').get(id=appointment_id)
    except Appointment.DoesNotExist:
        raise AppointmentNotFoundError("Appointment not found")


def _locked_appointment(appointment_id: UUID) -> Appointment:
    """Load an appointment locked until the surrounding transaction ends."""
    try:
        return Appointment.objects.select_for_update().get(id=appointment_id)
    except Appointment.DoesNotExist:
        raise AppointmentNotFoundError("Appointment not found")


def find_conflicts(*, dog_id: UUID, start, duration_minutes: int, exclude_id: Optional[UUID] = None) -> list:
    """Return the dog's active appointments that overlap ``[start, start + duration)``."""
    end = start + timedelta(minutes=duration_minutes)
    # Longest service is well under a day, so only nearby rows can overlap
    candidates = Appointment.objects.filter(
        dog_id=dog_id,
        status__in=ACTIVE_STATUSES,
        date__lt=end,
        date__gt=start - timedelta(days=1),
    )
    if exclude_id is not None:
        candidates = candidates.exclude(id=exclude_id)
    return [appt for appt in candidates if appt.overlaps(start, end)]


@transaction.atomic
def schedule_appointment(
    *,
    owner_id: UUID,
    dog_id: UUID,
    date,
    service_type: str,
    duration_minutes: Optional[int] = None,
    notes: str = '',
    tags: Optional[list] = None,
    created_by=None,
) -> Appointment:
    """
    Book a grooming appointment.

    Args:
        owner_id: Owner booking the visit
        dog_id: Dog being groomed, must belong to the owner
        date: Start time
        service_type: One of ServiceType
        duration_minutes: Defaults to the service's estimated duration
        notes: Optional initial notes
        tags: Optional appointment tags
        created_by: User booking the appointment

    Returns:
        Created Appointment

    Raises:
        OwnerNotFoundError / DogNotFoundError: Unknown owner or dog
        DogOwnerMismatchError: The dog belongs to someone else
        AppointmentConflictError: The dog already has an active appointment
            overlapping the requested slot
    """
    owner = get_owner_by_id(owner_id=owner_id)
    dog = get_dog_by_id(dog_id=dog_id)
    if dog.owner_id != owner.id:
        raise DogOwnerMismatchError(f"{dog.name} does not belong to {owner.display_name}")

    duration = duration_minutes or estimated_duration(service_type)
    conflicts = find_conflicts(dog_id=dog.id, start=date, duration_minutes=duration)
    if conflicts:
        raise AppointmentConflictError(
            f"{dog.name} already has an appointment at {conflicts[0].date:%Y-%m-%d %H:%M}",
            conflicting=conflicts[0],
        )

    appointment = Appointment(
        owner=owner,
        dog=dog,
        date=date,
        duration_minutes=duration,
        service_type=service_type,
        notes=notes,
        tags=list(tags or []),
        created_by=created_by,
        last_modified_by=created_by,
    )
    appointment.add_audit_entry(AuditAction.CREATED, created_by, f"Scheduled {service_type}")
    appointment.save()

    _record(AuditAction.CREATED, appointment, created_by, date=date.isoformat(), service_type=service_type)
    logger.info("Scheduled appointment %s for dog %s", appointment.id, dog.id)
    return appointment


@transaction.atomic
def update_appointment_status(*, appointment_id: UUID, status: str, updated_by=None) -> Appointment:
    """
    Move an appointment to a new status.

    Completed, cancelled and no-show appointments are final. Completing an
    appointment credits the owner's loyalty program with one visit.

    Raises:
        AppointmentNotFoundError: If appointment doesn't exist
        InvalidStatusTransitionError: If the appointment is already final
    """
    appointment = _locked_appointment(appointment_id)
    previous = appointment.status
    if previous == status:
        return appointment
    if previous in TERMINAL_STATUSES:
        raise InvalidStatusTransitionError(
            f"Cannot change a {appointment.get_status_display().lower()} appointment"
        )

    appointment.status = status
    appointment.last_modified_by = updated_by
    appointment.add_audit_entry(AuditAction.STATUS_CHANGED, updated_by, f"{previous} -> {status}")
    appointment.save()
    _record(AuditAction.STATUS_CHANGED, appointment, updated_by, previous=previous)

    if status == AppointmentStatus.COMPLETED:
        award_points(
            owner_id=appointment.owner_id,
            points=settings.FURFOLIO_POINTS_PER_VISIT,
            for_visit=True,
            user=updated_by,
        )
    return appointment


@transaction.atomic
def cancel_appointment(*, appointment_id: UUID, reason: str = '', updated_by=None) -> Appointment:
    appointment = update_appointment_status(
        appointment_id=appointment_id,
        status=AppointmentStatus.CANCELLED,
        updated_by=updated_by,
    )
    if reason:
        appointment = add_appointment_note(
            appointment_id=appointment.id,
            note=f"Cancelled: {reason}",
            updated_by=updated_by,
        )
    return appointment


@transaction.atomic
def add_appointment_note(*, appointment_id: UUID, note: str, updated_by=None) -> Appointment:
    """Append a note on a new line of the appointment's notes."""
    appointment = _locked_appointment(appointment_id)
    appointment.add_note(note)
    appointment.last_modified_by = updated_by
    appointment.add_audit_entry(AuditAction.NOTE_ADDED, updated_by, note)
    appointment.save()
    _record(AuditAction.NOTE_ADDED, appointment, updated_by)
    return appointment


@transaction.atomic
def update_appointment(*, appointment_id: UUID, updated_by=None, **changes) -> Appointment:
    """
    Reschedule or edit an appointment.

    Moving the slot re-runs the conflict check.
    """
    appointment = _locked_appointment(appointment_id)
    editable = ('date', 'duration_minutes', 'service_type', 'tags')
    changed = [f for f, v in changes.items() if f in editable and getattr(appointment, f) != v]
    if not changed:
        return appointment

    for field in changed:
        setattr(appointment, field, changes[field])

    if 'date' in changed or 'duration_minutes' in changed:
        conflicts = find_conflicts(
            dog_id=appointment.dog_id,
            start=appointment.date,
            duration_minutes=appointment.duration_minutes,
            exclude_id=appointment.id,
        )
        if conflicts:
            raise AppointmentConflictError(
                f"{appointment.dog.name} already has an appointment at {conflicts[0].date:%Y-%m-%d %H:%M}",
                conflicting=conflicts[0],
            )

    appointment.last_modified_by = updated_by
    appointment.add_audit_entry(AuditAction.MODIFIED, updated_by, ', '.join(sorted(changed)))
    appointment.save()
    _record(AuditAction.MODIFIED, appointment, updated_by, fields=sorted(changed))
    return appointment


@transaction.atomic
def delete_appointment(*, appointment_id: UUID, deleted_by=None) -> None:
    appointment = _locked_appointment(appointment_id)
    _record(AuditAction.DELETED, appointment, deleted_by, date=appointment.date.isoformat())
    appointment.delete()


def upcoming_appointments(*, days: int = 7, dog_id: Optional[UUID] = None, owner_id: Optional[UUID] = None) -> QuerySet:
    """Scheduled appointments between now and ``days`` ahead, soonest first."""
    now = timezone.now()
    queryset = Appointment.objects.select_related('owner', 'dog').filter(
        status=AppointmentStatus.SCHEDULED,
        date__gt=now,
        date__lte=now + timedelta(days=days),
    )
    if dog_id:
        queryset = queryset.filter(dog_id=dog_id)
    if owner_id:
        queryset = queryset.filter(owner_id=owner_id)
    return queryset.order_by('date')
