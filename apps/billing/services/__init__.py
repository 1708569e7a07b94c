"""
Billing services - Business logic layer.

Charges, payments and voids, each recorded in the ``charge`` audit log.
"""

from .charge_management import (
    record_charge_event,
    get_charge_by_id,
    record_charge,
    mark_charge_paid,
    void_charge,
    outstanding_charges,
    outstanding_balance,
)
from .exceptions import (
    BillingServiceError,
    ChargeNotFoundError,
    ChargeAlreadyPaidError,
    InvalidPaymentMethodError,
)

__all__ = [
    'record_charge_event',
    'get_charge_by_id',
    'record_charge',
    'mark_charge_paid',
    'void_charge',
    'outstanding_charges',
    'outstanding_balance',
    # Exceptions
    'BillingServiceError',
    'ChargeNotFoundError',
    'ChargeAlreadyPaidError',
    'InvalidPaymentMethodError',
]
