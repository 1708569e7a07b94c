"""Domain-specific exceptions for diagnostics services."""


class DiagnosticsServiceError(Exception):
    """Base exception for diagnostics services."""
    pass


class CrashReportNotFoundError(DiagnosticsServiceError):
    """Raised when a crash report does not exist."""
    pass
