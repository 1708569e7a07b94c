from datetime import timedelta
from decimal import Decimal
from typing import Optional

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
import uuid

from apps.audit.trail import append_line, recent_lines
from apps.core.tokens import TokenListMixin


class ServiceType(models.TextChoices):
    FULL_GROOM = 'full_groom', 'Full Groom'
    BASIC_BATH = 'basic_bath', 'Basic Bath'
    NAIL_TRIM = 'nail_trim', 'Nail Trim'
    CUSTOM = 'custom', 'Custom'


# Estimated duration in minutes per service
SERVICE_DURATIONS = {
    ServiceType.FULL_GROOM: 90,
    ServiceType.BASIC_BATH: 45,
    ServiceType.NAIL_TRIM: 20,
    ServiceType.CUSTOM: 60,
}


def estimated_duration(service_type: str) -> int:
    return SERVICE_DURATIONS.get(service_type, SERVICE_DURATIONS[ServiceType.CUSTOM])


class AppointmentStatus(models.TextChoices):
    SCHEDULED = 'scheduled', 'Scheduled'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    NO_SHOW = 'no_show', 'No Show'


ACTIVE_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.IN_PROGRESS)
TERMINAL_STATUSES = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW)


class AuditAction(models.TextChoices):
    CREATED = 'created', 'Created'
    MODIFIED = 'modified', 'Modified'
    DELETED = 'deleted', 'Deleted'
    STATUS_CHANGED = 'status_changed', 'Status Changed'
    NOTE_ADDED = 'note_added', 'Note Added'


class Appointment(models.Model):
    """A booked grooming service for one dog."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('owners.DogOwner', on_delete=models.CASCADE, related_name='appointments')
    dog = models.ForeignKey('owners.Dog', on_delete=models.CASCADE, related_name='appointments')

    date = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField(default=60, validators=[MinValueValidator(1)])
    service_type = models.CharField(max_length=20, choices=ServiceType.choices, default=ServiceType.FULL_GROOM)
    status = models.CharField(max_length=20, choices=AppointmentStatus.choices, default=AppointmentStatus.SCHEDULED)
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)

    # List of {id, date, action, user, role, context, escalate}
    audit_log = models.JSONField(default=list, blank=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments_created',
    )
    last_modified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='appointments_modified',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments'
        indexes = [
            models.Index(fields=['date'], name='appointments_date_idx'),
            models.Index(fields=['dog', 'date'], name='appointments_dog_date_idx'),
            models.Index(fields=['owner', 'date'], name='appointments_owner_date_idx'),
            models.Index(fields=['status', 'date'], name='appointments_status_idx'),
        ]
        ordering = ['date']

    def __str__(self):
        return f"{self.get_service_type_display()} for {self.dog.name} at {self.date:%Y-%m-%d %H:%M}"

    @property
    def end_date(self):
        return self.date + timedelta(minutes=self.duration_minutes)

    @property
    def is_past(self) -> bool:
        return self.date <= timezone.now()

    @property
    def is_upcoming(self) -> bool:
        return self.date > timezone.now() and self.status == AppointmentStatus.SCHEDULED

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def overlaps(self, start, end) -> bool:
        return self.date < end and start < self.end_date

    def add_audit_entry(self, action: str, user=None, context: Optional[str] = None) -> dict:
        """Append a structured entry to the appointment's audit trail (caller saves)."""
        entry = {
            'id': str(uuid.uuid4()),
            'date': timezone.now().isoformat(),
            'action': action,
            'user': user.email if user is not None else None,
            'role': getattr(user, 'role', None),
            'context': context,
            'escalate': action == AuditAction.DELETED,
        }
        self.audit_log = list(self.audit_log or []) + [entry]
        return entry

    def add_note(self, note: str) -> None:
        """Append a note on its own line."""
        self.notes = f"{self.notes}\n{note}" if self.notes else note


class SessionBadge(models.TextChoices):
    INCIDENT = 'incident', 'Incident'
    LOYALTY_REWARD = 'loyalty_reward', 'Loyalty Reward'
    FIRST_SESSION = 'first_session', 'First Session'
    REFERRAL = 'referral', 'Referral'
    OWNER_PRESENT = 'owner_present', 'Owner Present'
    DIFFICULT_DOG = 'difficult_dog', 'Difficult Dog'
    NEW_STYLE = 'new_style', 'New Style'
    REBOOKED = 'rebooked', 'Rebooked'
    RUSHED = 'rushed', 'Rushed'


class GroomingSession(TokenListMixin, models.Model):
    """What actually happened during a grooming visit."""

    token_choices = SessionBadge

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    dog = models.ForeignKey('owners.Dog', on_delete=models.CASCADE, related_name='grooming_sessions')
    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sessions',
    )
    staff = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='grooming_sessions',
    )

    date = models.DateTimeField(default=timezone.now)
    service_type = models.CharField(max_length=20, choices=ServiceType.choices, default=ServiceType.FULL_GROOM)
    duration_minutes = models.PositiveIntegerField(default=60, validators=[MinValueValidator(1)])
    notes = models.TextField(blank=True)
    products_used = models.JSONField(default=list, blank=True)
    outcomes = models.TextField(blank=True)
    is_favorite = models.BooleanField(default=False)
    rating = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    route_order = models.PositiveIntegerField(null=True, blank=True)

    # Financials
    session_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    session_revenue = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    tip = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    badge_tokens = models.JSONField(default=list, blank=True)
    audit_log = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'grooming_sessions'
        indexes = [
            models.Index(fields=['dog', 'date'], name='sessions_dog_date_idx'),
            models.Index(fields=['date'], name='sessions_date_idx'),
        ]
        ordering = ['-date']

    def __str__(self):
        return f"Session for {self.dog.name} on {self.date:%Y-%m-%d}"

    @property
    def profit(self) -> Decimal:
        return self.session_revenue - self.session_cost

    @property
    def revenue_per_hour(self) -> Decimal:
        if not self.duration_minutes:
            return Decimal('0.00')
        return (self.session_revenue * 60 / Decimal(self.duration_minutes)).quantize(Decimal('0.01'))

    @property
    def quick_status(self) -> str:
        if SessionBadge.INCIDENT in self.badge_tokens:
            return 'Incident'
        if self.rating <= 2:
            return 'Low Rating'
        if self.is_favorite:
            return 'Favorite'
        return 'Completed'

    def add_audit_entry(self, text: str) -> None:
        self.audit_log = append_line(self.audit_log, text)

    def recent_audit_summary(self) -> list:
        return recent_lines(self.audit_log, 2)
