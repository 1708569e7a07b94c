from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class ChargeType(models.TextChoices):
    FULL_GROOM = 'full_groom', 'Full Groom'
    BASIC_BATH = 'basic_bath', 'Basic Bath'
    NAIL_TRIM = 'nail_trim', 'Nail Trim'
    CUSTOM = 'custom', 'Custom Service'
    PRODUCT = 'product', 'Product'


class PaymentMethod(models.TextChoices):
    UNPAID = 'unpaid', 'Unpaid'
    CASH = 'cash', 'Cash'
    CREDIT_CARD = 'credit_card', 'Credit Card'
    DEBIT_CARD = 'debit_card', 'Debit Card'
    ZELLE = 'zelle', 'Zelle'
    OTHER = 'other', 'Other'


class Charge(models.Model):
    """Money owed or paid for a service or product."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('owners.DogOwner', on_delete=models.CASCADE, related_name='charges')
    dog = models.ForeignKey(
        'owners.Dog',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='charges',
    )
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='charges',
    )

    date = models.DateTimeField(default=timezone.now)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    charge_type = models.CharField(max_length=20, choices=ChargeType.choices, default=ChargeType.FULL_GROOM)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.UNPAID)
    is_paid = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)

    processed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='charges_processed',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'charges'
        indexes = [
            models.Index(fields=['date'], name='charges_date_idx'),
            models.Index(fields=['owner', 'date'], name='charges_owner_date_idx'),
            models.Index(fields=['is_paid'], name='charges_is_paid_idx'),
        ]
        ordering = ['-date']

    def __str__(self):
        return f"{self.get_charge_type_display()} ${self.amount} ({self.owner.display_name})"

    @property
    def summary(self) -> str:
        state = 'Paid' if self.is_paid else 'Unpaid'
        return f"{self.get_charge_type_display()}: ${self.amount:.2f} ({state}, {self.date:%Y-%m-%d})"

    def to_audit_payload(self) -> dict:
        return {
            'charge_id': str(self.id),
            'type': self.charge_type,
            'amount': str(self.amount),
            'is_paid': self.is_paid,
            'payment_method': self.payment_method,
        }
