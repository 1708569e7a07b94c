"""Charge recording and payment service."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet, Sum

from apps.audit.buffer import record_on_commit, should_escalate
from apps.owners.services import get_owner_by_id
from ..models import Charge, PaymentMethod
from .exceptions import ChargeNotFoundError, ChargeAlreadyPaidError, InvalidPaymentMethodError

logger = logging.getLogger(__name__)


def record_charge_event(operation: str, charge: Charge, *, user=None, detail: Optional[str] = None):
    """Record a charge operation ('create', 'pay', 'void') in the charge log once it commits."""
    record_on_commit(
        'charge',
        operation,
        actor=user.email if user is not None else None,
        escalate=should_escalate(operation, operation == 'void'),
        detail=detail,
        **charge.to_audit_payload(),
    )


def get_charge_by_id(*, charge_id: UUID) -> Charge:
    try:
        return Charge.objects.select_related('owner', 'dog').get(id=charge_id)
    except Charge.DoesNotExist:
        raise ChargeNotFoundError("Charge not found")


def _locked_charge(charge_id: UUID) -> Charge:
    try:
        return Charge.objects.select_for_update().get(id=charge_id)
    except Charge.DoesNotExist:
        raise ChargeNotFoundError("Charge not found")


@transaction.atomic
def record_charge(
    *,
    owner_id: UUID,
    amount: Decimal,
    charge_type: str,
    dog=None,
    appointment=None,
    date=None,
    payment_method: str = PaymentMethod.UNPAID,
    notes: str = '',
    tags: Optional[list] = None,
    created_by=None,
) -> Charge:
    """
    Record a new charge for an owner.

    A charge recorded with a payment method other than ``unpaid`` is stored
    as paid.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
    """
    owner = get_owner_by_id(owner_id=owner_id)
    fields = {}
    if date is not None:
        fields['date'] = date
    charge = Charge.objects.create(
        owner=owner,
        dog=dog,
        appointment=appointment,
        amount=amount,
        charge_type=charge_type,
        payment_method=payment_method,
        is_paid=payment_method != PaymentMethod.UNPAID,
        notes=notes,
        tags=list(tags or []),
        processed_by=created_by,
        **fields,
    )
    record_charge_event('create', charge, user=created_by, detail=f"Charge created ({charge.get_charge_type_display()}): {amount}")
    logger.info("Recorded charge %s for owner %s", charge.id, owner.id)
    return charge


@transaction.atomic
def mark_charge_paid(*, charge_id: UUID, payment_method: str, updated_by=None) -> Charge:
    """
    Settle an unpaid charge.

    Raises:
        ChargeNotFoundError: If charge doesn't exist
        ChargeAlreadyPaidError: If the charge is already paid
        InvalidPaymentMethodError: If ``payment_method`` is ``unpaid``
    """
    charge = _locked_charge(charge_id)
    if charge.is_paid:
        raise ChargeAlreadyPaidError("Charge is already paid")
    if payment_method == PaymentMethod.UNPAID:
        raise InvalidPaymentMethodError("Choose how the charge was paid")

    charge.is_paid = True
    charge.payment_method = payment_method
    charge.processed_by = updated_by or charge.processed_by
    charge.save(update_fields=['is_paid', 'payment_method', 'processed_by', 'updated_at'])
    record_charge_event('pay', charge, user=updated_by, detail=f"Paid by {charge.get_payment_method_display()}")
    return charge


@transaction.atomic
def void_charge(*, charge_id: UUID, voided_by=None, reason: str = '') -> None:
    """Delete a charge. Voids are always escalated in the charge log."""
    charge = _locked_charge(charge_id)
    record_charge_event('void', charge, user=voided_by, detail=reason or None)
    logger.warning("Voided charge %s", charge.id)
    charge.delete()


def outstanding_charges(*, owner_id: Optional[UUID] = None) -> QuerySet:
    queryset = Charge.objects.select_related('owner', 'dog').filter(is_paid=False)
    if owner_id:
        queryset = queryset.filter(owner_id=owner_id)
    return queryset.order_by('date')


def outstanding_balance(*, owner_id: UUID) -> Decimal:
    total = outstanding_charges(owner_id=owner_id).aggregate(total=Sum('amount'))['total']
    return total or Decimal('0.00')
