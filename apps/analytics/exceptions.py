"""
Domain exceptions for analytics app.

These exceptions are raised by the revenue, projection and export layers
and represent invalid requests, separate from HTTP concerns. Views map
them onto ``apps.core.exceptions`` errors.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidDateRangeError
    ├── InvalidGoalAmountError
    ├── InvalidProjectionError
    └── ExportFailedError

Usage:
    from apps.analytics.exceptions import InvalidDateRangeError

    if start and end and start > end:
        raise InvalidDateRangeError("Start date must be before end date")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    Catch this in views to handle every analytics failure at once::

        try:
            total = RevenueQueries.total_revenue(start=start, end=end)
        except AnalyticsServiceError as e:
            raise InvalidInputError(str(e))
    """

    pass


class InvalidDateRangeError(AnalyticsServiceError):
    """
    Raised when a date range is invalid.

    Typically when start is after end.
    """

    pass


class InvalidGoalAmountError(AnalyticsServiceError):
    """Raised when a revenue goal is zero or negative."""

    pass


class InvalidProjectionError(AnalyticsServiceError):
    """Raised when growth projection inputs are out of range (e.g. negative years)."""

    pass


class ExportFailedError(AnalyticsServiceError):
    """Raised when a CSV export cannot be written."""

    pass
