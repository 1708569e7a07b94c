from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.billing.models import Charge, ChargeType, PaymentMethod


# =============================================================================
# Charges
# =============================================================================

@pytest.fixture
def revenue_data(owner, other_owner, dog, other_dog):
    """
    Charges spread over the last ~45 days.

    owner:       120.00 full groom today (paid), 30.00 product 5 days ago,
                 100.00 full groom 45 days ago
    other_owner:  40.00 basic bath today (unpaid)
    """
    now = timezone.now()
    return {
        'today_groom': Charge.objects.create(
            owner=owner, dog=dog, amount=Decimal('120.00'), date=now,
            charge_type=ChargeType.FULL_GROOM, payment_method=PaymentMethod.CASH, is_paid=True,
        ),
        'recent_product': Charge.objects.create(
            owner=owner, amount=Decimal('30.00'), date=now - timedelta(days=5),
            charge_type=ChargeType.PRODUCT, payment_method=PaymentMethod.CASH, is_paid=True,
        ),
        'old_groom': Charge.objects.create(
            owner=owner, dog=dog, amount=Decimal('100.00'), date=now - timedelta(days=45),
            charge_type=ChargeType.FULL_GROOM, payment_method=PaymentMethod.ZELLE, is_paid=True,
        ),
        'today_bath': Charge.objects.create(
            owner=other_owner, dog=other_dog, amount=Decimal('40.00'), date=now,
            charge_type=ChargeType.BASIC_BATH,
        ),
    }
