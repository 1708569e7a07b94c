"""Grooming session records."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.owners.services import get_dog_by_id
from ..models import GroomingSession, SessionBadge
from .exceptions import SessionNotFoundError

EDITABLE_SESSION_FIELDS = (
    'date',
    'service_type',
    'duration_minutes',
    'notes',
    'products_used',
    'outcomes',
    'is_favorite',
    'rating',
    'route_order',
    'session_cost',
    'session_revenue',
    'tip',
)


def get_session_by_id(*, session_id: UUID) -> GroomingSession:
    try:
        return GroomingSession.objects.select_related('dog', 'staff').get(id=session_id)
    except GroomingSession.DoesNotExist:
        raise SessionNotFoundError("Grooming session not found")


@transaction.atomic
def log_grooming_session(*, dog_id: UUID, staff=None, appointment=None, **fields) -> GroomingSession:
    """
    Record a finished grooming session for a dog.

    The dog's first session is badged ``first_session``.

    Raises:
        DogNotFoundError: If the dog doesn't exist
    """
    dog = get_dog_by_id(dog_id=dog_id)
    is_first = not dog.grooming_sessions.exists()
    session = GroomingSession(
        dog=dog,
        staff=staff,
        appointment=appointment,
        **{k: v for k, v in fields.items() if k in EDITABLE_SESSION_FIELDS},
    )
    if is_first:
        session.add_token(SessionBadge.FIRST_SESSION)
    session.add_audit_entry(f"Logged by {staff.email if staff else 'system'}")
    session.save()
    return session


@transaction.atomic
def update_grooming_session(*, session_id: UUID, updated_by=None, **changes) -> GroomingSession:
    session = get_session_by_id(session_id=session_id)
    changed = [f for f, v in changes.items() if f in EDITABLE_SESSION_FIELDS and getattr(session, f) != v]
    for field in changed:
        setattr(session, field, changes[field])
    if changed:
        actor = updated_by.email if updated_by else 'system'
        session.add_audit_entry(f"Updated {', '.join(sorted(changed))} by {actor}")
        session.save()
    return session


@transaction.atomic
def set_session_badge(*, session_id: UUID, badge: str, add: bool = True, updated_by=None) -> GroomingSession:
    """Add or remove a session badge."""
    session = get_session_by_id(session_id=session_id)
    changed = session.add_token(badge) if add else session.remove_token(badge)
    if changed:
        verb = 'Added' if add else 'Removed'
        session.add_audit_entry(f"{verb} badge {badge}")
        session.save()
    return session


def session_totals(queryset) -> dict:
    """Aggregate cost, revenue, tips and profit (revenue minus cost) over a set of sessions."""
    totals = {'cost': Decimal('0.00'), 'revenue': Decimal('0.00'), 'tips': Decimal('0.00')}
    count = 0
    for session in queryset:
        totals['cost'] += session.session_cost
        totals['revenue'] += session.session_revenue
        totals['tips'] += session.tip
        count += 1
    totals['profit'] = totals['revenue'] - totals['cost']
    totals['count'] = count
    return totals
