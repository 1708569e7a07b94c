"""
Diagnostics services - Business logic layer.

- Crash report intake and resolution
- Update checks against the release API
- Full JSON backup and restore
"""

from .crash_reports import get_crash_report_by_id, log_crash, resolve_crash
from .updates import AppUpdateChecker, UpdateCheckResult, compare_versions, version_key
from .backup import export_backup, restore_backup, BACKUP_MODELS
from .exceptions import DiagnosticsServiceError, CrashReportNotFoundError

__all__ = [
    'get_crash_report_by_id',
    'log_crash',
    'resolve_crash',
    'AppUpdateChecker',
    'UpdateCheckResult',
    'compare_versions',
    'version_key',
    'export_backup',
    'restore_backup',
    'BACKUP_MODELS',
    # Exceptions
    'DiagnosticsServiceError',
    'CrashReportNotFoundError',
]
