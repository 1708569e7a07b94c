import json
from datetime import date
from decimal import Decimal
from statistics import mean
from typing import List, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.db.models import Sum
from django.utils import timezone
import uuid

from apps.audit.trail import append_line, recent_lines
from apps.core.tokens import TokenListMixin


RETENTION_RISK_DAYS = 60
AUDIT_TRAIL_LIMIT = 200

# Spend thresholds for owner tiers: [0,500) Bronze, [500,2000) Silver,
# [2000,5000) Gold, [5000,inf) Platinum
OWNER_TIER_THRESHOLDS = (
    (Decimal('5000'), 'Platinum'),
    (Decimal('2000'), 'Gold'),
    (Decimal('500'), 'Silver'),
    (Decimal('0'), 'Bronze'),
)


class ContactMethod(models.TextChoices):
    PHONE = 'phone', 'Phone'
    EMAIL = 'email', 'Email'
    SMS = 'sms', 'SMS'


class OwnerBadge(models.TextChoices):
    LOYAL = 'loyal', 'Loyal'
    FRIENDLY = 'friendly', 'Friendly'
    AT_RISK = 'at_risk', 'At Risk'
    BIG_SPENDER = 'big_spender', 'Big Spender'
    NEW_CLIENT = 'new_client', 'New Client'
    MULTI_PET = 'multi_pet', 'Multi-Pet'
    FEEDBACK_CHAMPION = 'feedback_champion', 'Feedback Champion'
    PLATINUM = 'platinum', 'Platinum'


class DogTag(models.TextChoices):
    LOYAL = 'loyal', 'Loyal'
    AGGRESSIVE = 'aggressive', 'Aggressive'
    OVERDUE_VACCINATION = 'overdue_vaccination', 'Overdue Vaccination'
    SENIOR = 'senior', 'Senior'
    PUPPY = 'puppy', 'Puppy'
    BIRTHDAY_THIS_MONTH = 'birthday_this_month', 'Birthday This Month'
    SPECIAL_NEEDS = 'special_needs', 'Special Needs'
    FREQUENT = 'frequent', 'Frequent'
    FIRST_VISIT = 'first_visit', 'First Visit'


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    UNKNOWN = 'unknown', 'Unknown'


def tier_for_spend(amount) -> str:
    """Owner tier as a step function of lifetime spend."""
    amount = Decimal(amount or 0)
    for threshold, tier in OWNER_TIER_THRESHOLDS:
        if amount >= threshold:
            return tier
    return 'Bronze'


def whole_months_between(start: date, end: date) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def _to_json(data: dict) -> str:
    return json.dumps(data, indent=2, sort_keys=True, cls=DjangoJSONEncoder)


class DogOwner(TokenListMixin, models.Model):
    """A client of the grooming business."""

    token_choices = OwnerBadge

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner_name = models.CharField(max_length=150)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    emergency_contact = models.CharField(max_length=150, blank=True)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    # Preferences
    preferred_contact = models.CharField(
        max_length=10,
        choices=ContactMethod.choices,
        default=ContactMethod.PHONE,
    )
    preferred_language = models.CharField(max_length=10, default='en')

    # Badges, tags & audit
    badge_tokens = models.JSONField(default=list, blank=True)
    tags = models.ManyToManyField('tags.Tag', blank=True, related_name='owners')
    audit_log = models.JSONField(default=list, blank=True)

    # Metadata
    date_added = models.DateTimeField(auto_now_add=True)
    last_modified = models.DateTimeField(auto_now=True)
    last_modified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_owners',
    )

    class Meta:
        db_table = 'dog_owners'
        indexes = [
            models.Index(fields=['owner_name'], name='dog_owners_name_idx'),
            models.Index(fields=['phone'], name='dog_owners_phone_idx'),
            models.Index(fields=['is_active'], name='dog_owners_active_idx'),
        ]
        ordering = ['owner_name']

    def __str__(self):
        return self.display_name

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    @property
    def display_name(self) -> str:
        return self.owner_name.strip() or 'Unnamed Owner'

    # -------------------------------------------------------------------------
    # Business intelligence
    # -------------------------------------------------------------------------

    @property
    def dog_count(self) -> int:
        return self.dogs.count()

    @property
    def has_active_dogs(self) -> bool:
        return self.dogs.filter(is_active=True).exists()

    @property
    def total_spent(self) -> Decimal:
        return self.charges.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    def spend_for_year(self, year: int) -> Decimal:
        return (
            self.charges.filter(date__year=year).aggregate(total=Sum('amount'))['total']
            or Decimal('0.00')
        )

    @property
    def completed_appointments(self):
        from apps.appointments.models import AppointmentStatus
        return self.appointments.filter(status=AppointmentStatus.COMPLETED)

    @property
    def average_spend_per_appointment(self) -> Decimal:
        completed = self.completed_appointments.count()
        if not completed:
            return Decimal('0.00')
        return (self.total_spent / completed).quantize(Decimal('0.01'))

    @property
    def last_appointment_date(self):
        latest = self.appointments.order_by('-date').values_list('date', flat=True).first()
        return latest

    @property
    def is_retention_risk(self) -> bool:
        """True with no appointments, or when the last one is over 60 days old."""
        last = self.last_appointment_date
        if last is None:
            return True
        return (timezone.now() - last).days > RETENTION_RISK_DAYS

    @property
    def loyalty_tier(self) -> str:
        return tier_for_spend(self.total_spent)

    @property
    def average_appointment_interval(self) -> Optional[float]:
        """Mean number of days between consecutive appointments."""
        dates = list(self.appointments.order_by('date').values_list('date', flat=True))
        if len(dates) < 2:
            return None
        gaps = [(later - earlier).total_seconds() / 86400 for earlier, later in zip(dates, dates[1:])]
        return round(mean(gaps), 2)

    # -------------------------------------------------------------------------
    # Audit trail
    # -------------------------------------------------------------------------

    def add_audit_entry(self, text: str) -> None:
        """Append a timestamped line to the owner's audit trail (caller saves)."""
        self.audit_log = append_line(self.audit_log, text, limit=AUDIT_TRAIL_LIMIT)

    def recent_audit_log(self, count: int = 3) -> List[str]:
        return recent_lines(self.audit_log, count)

    def export_audit_log_json(self) -> str:
        return json.dumps(list(self.audit_log or []), indent=2)

    def to_export_dict(self) -> dict:
        return {
            'id': self.id,
            'owner_name': self.owner_name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'emergency_contact': self.emergency_contact,
            'notes': self.notes,
            'is_active': self.is_active,
            'preferred_contact': self.preferred_contact,
            'preferred_language': self.preferred_language,
            'badges': list(self.badge_tokens or []),
            'tags': [tag.label for tag in self.tags.all()],
            'dog_count': self.dog_count,
            'total_spent': self.total_spent,
            'loyalty_tier': self.loyalty_tier,
            'last_appointment_date': self.last_appointment_date,
            'date_added': self.date_added,
        }

    def export_json(self) -> str:
        return _to_json(self.to_export_dict())


class Dog(TokenListMixin, models.Model):
    """A dog belonging to an owner."""

    token_field = 'tags'
    token_choices = DogTag

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(DogOwner, on_delete=models.CASCADE, related_name='dogs')
    name = models.CharField(max_length=100)
    breed = models.CharField(max_length=100, blank=True)
    birthdate = models.DateField(null=True, blank=True)
    color = models.CharField(max_length=50, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, default=Gender.UNKNOWN)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    tags = models.JSONField(default=list, blank=True)

    date_added = models.DateTimeField(auto_now_add=True)
    last_modified = models.DateTimeField(auto_now=True)
    last_modified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='modified_dogs',
    )

    class Meta:
        db_table = 'dogs'
        indexes = [
            models.Index(fields=['owner', 'is_active'], name='dogs_owner_active_idx'),
            models.Index(fields=['name'], name='dogs_name_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.owner.display_name})"

    @property
    def age(self) -> Optional[int]:
        """Age in whole years, or None without a birthdate."""
        if self.birthdate is None:
            return None
        today = timezone.localdate()
        years = today.year - self.birthdate.year
        if (today.month, today.day) < (self.birthdate.month, self.birthdate.day):
            years -= 1
        return years

    @property
    def lifetime_value(self) -> Decimal:
        return self.charges.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    @property
    def appointment_frequency_months(self) -> Optional[float]:
        """Average whole months between appointments; None with fewer than two."""
        dates = [d.date() for d in self.appointments.order_by('date').values_list('date', flat=True)]
        if len(dates) < 2 or dates[-1] <= dates[0]:
            return None
        return whole_months_between(dates[0], dates[-1]) / (len(dates) - 1)

    @property
    def loyalty_score(self) -> int:
        score = 0
        if DogTag.LOYAL in self.tags:
            score += 1
        frequency = self.appointment_frequency_months
        if frequency is not None and frequency < 2.0:
            score += 1
        if self.lifetime_value > 500:
            score += 1
        return score

    @property
    def is_birthday_month(self) -> bool:
        if self.birthdate is None:
            return False
        return self.birthdate.month == timezone.localdate().month

    @property
    def tag_summary(self) -> str:
        return ', '.join(self.tags or [])

    @property
    def status_label(self) -> str:
        if not self.is_active:
            return 'Inactive'
        return self.tags[0] if self.tags else 'Active'

    def to_export_dict(self) -> dict:
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'name': self.name,
            'breed': self.breed,
            'birthdate': self.birthdate,
            'color': self.color,
            'gender': self.gender,
            'notes': self.notes,
            'is_active': self.is_active,
            'tags': list(self.tags or []),
            'age': self.age,
            'lifetime_value': self.lifetime_value,
            'loyalty_score': self.loyalty_score,
        }

    def export_json(self) -> str:
        return _to_json(self.to_export_dict())
