from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class CrashType(models.TextChoices):
    CRASH = 'crash', 'Crash'
    FATAL_ERROR = 'fatal_error', 'Fatal Error'
    DATA_CORRUPTION = 'data_corruption', 'Data Corruption'


def _current_version():
    return settings.FURFOLIO_APP_VERSION


class CrashReport(models.Model):
    """A crash or fatal error reported by a client."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateTimeField(default=timezone.now)
    report_type = models.CharField(max_length=20, choices=CrashType.choices, default=CrashType.CRASH)
    message = models.TextField()
    stack_trace = models.TextField(blank=True)
    device_info = models.CharField(max_length=255, blank=True)
    resolved = models.BooleanField(default=False)

    app_version = models.CharField(max_length=32, default=_current_version)
    build_number = models.CharField(max_length=32, blank=True)
    os_version = models.CharField(max_length=64, blank=True)
    device_model = models.CharField(max_length=64, blank=True)

    class Meta:
        db_table = 'crash_reports'
        indexes = [
            models.Index(fields=['resolved', 'date'], name='crash_reports_resolved_idx'),
        ]
        ordering = ['-date']

    def __str__(self):
        return f"{self.get_report_type_display()}: {self.message[:50]}"

    @property
    def formatted_date(self) -> str:
        return timezone.localtime(self.date).strftime('%Y-%m-%d %H:%M')

    @property
    def summary(self) -> str:
        state = 'resolved' if self.resolved else 'open'
        return f"{self.get_report_type_display()} on {self.formatted_date} ({state}): {self.message}"

    def to_audit_payload(self) -> dict:
        return {
            'report_id': str(self.id),
            'type': self.report_type,
            'app_version': self.app_version,
            'resolved': self.resolved,
        }
