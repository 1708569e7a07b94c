"""Crash report intake and resolution."""

import logging
from uuid import UUID

from django.db import transaction

from apps.audit.buffer import get_audit_log
from ..models import CrashReport, CrashType
from .exceptions import CrashReportNotFoundError

logger = logging.getLogger(__name__)

REPORT_FIELDS = (
    'date',
    'report_type',
    'message',
    'stack_trace',
    'device_info',
    'app_version',
    'build_number',
    'os_version',
    'device_model',
)


def get_crash_report_by_id(*, report_id: UUID) -> CrashReport:
    try:
        return CrashReport.objects.get(id=report_id)
    except CrashReport.DoesNotExist:
        raise CrashReportNotFoundError("Crash report not found")


@transaction.atomic
def log_crash(*, message: str, report_type: str = CrashType.CRASH, actor=None, **fields) -> CrashReport:
    """
    Store a crash report and note it in the ``crash_report`` log.

    Fatal errors and data corruption are escalated.
    """
    report = CrashReport.objects.create(
        message=message,
        report_type=report_type,
        **{k: v for k, v in fields.items() if k in REPORT_FIELDS},
    )
    get_audit_log('crash_report').record(
        'crash_logged',
        actor=actor,
        escalate=report_type != CrashType.CRASH,
        message=message,
        **report.to_audit_payload(),
    )
    logger.warning("Crash report %s (%s): %s", report.id, report_type, message)
    return report


@transaction.atomic
def resolve_crash(*, report_id: UUID, actor=None) -> CrashReport:
    report = get_crash_report_by_id(report_id=report_id)
    if not report.resolved:
        report.resolved = True
        report.save(update_fields=['resolved'])
        get_audit_log('crash_report').record('crash_resolved', actor=actor, **report.to_audit_payload())
    return report
