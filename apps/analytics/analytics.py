"""
Analytics Module
=================

This module provides revenue queries for the business dashboard. It
aggregates charges, appointments and owners to power charts, goal widgets
and client rankings.

Classes:
    RevenueQueries: Static methods for revenue analytics.

Key Features:
    - Total revenue over an optional date range
    - Zero-filled daily revenue for trend charts
    - Revenue grouped by service type
    - Top clients by lifetime spend
    - Monthly goal progress and period-over-period growth

Example:
    Getting this month's progress::

        from apps.analytics.analytics import RevenueQueries

        progress = RevenueQueries.monthly_goal_progress(goal=Decimal('5000'))
        print(f"{progress['progress']:.0%} of goal ({progress['total']})")

Note:
    This module is read-only and doesn't modify any data. All methods are
    static and every query accepts ``excluded_types`` (charge types to
    leave out, e.g. ``['product']``).
"""

import logging
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Sum, Count, Q, DecimalField
from django.db.models.functions import Coalesce, TruncDate
from django.utils import timezone

from apps.appointments.models import Appointment, AppointmentStatus
from apps.billing.models import Charge
from apps.owners.models import DogOwner
from .exceptions import InvalidDateRangeError, InvalidGoalAmountError

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def _charges(excluded_types=None):
    queryset = Charge.objects.all()
    if excluded_types:
        queryset = queryset.exclude(charge_type__in=list(excluded_types))
    return queryset


def _sum(queryset) -> Decimal:
    return queryset.aggregate(total=Sum('amount'))['total'] or ZERO


def _start_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.min))


class RevenueQueries:
    """
    Revenue queries over charges.

    Methods:
        total_revenue: Sum of charges in an optional date range.
        daily_revenue: Per-day totals for the last N days, oldest first.
        revenue_by_service: Totals grouped by charge type.
        top_clients: Owners ranked by total spend.
        monthly_goal_progress: This month's revenue against a goal.
        revenue_growth: Percent change against the previous period.
        dashboard: Everything the dashboard needs in one payload.

    Note:
        All methods return plain dictionaries or lists, not Django objects,
        making them suitable for JSON serialization in API responses.
    """

    @staticmethod
    def total_revenue(start=None, end=None, excluded_types=None) -> Decimal:
        """
        Sum charge amounts between ``start`` and ``end`` (both inclusive).

        Args:
            start (datetime, optional): Earliest charge date.
            end (datetime, optional): Latest charge date.
            excluded_types (list, optional): Charge types to leave out.

        Returns:
            Decimal: The total, ``0.00`` when nothing matches.

        Raises:
            InvalidDateRangeError: If ``start`` is after ``end``.
        """
        if start is not None and end is not None and start > end:
            raise InvalidDateRangeError("Start date must be before end date")

        queryset = _charges(excluded_types)
        if start is not None:
            queryset = queryset.filter(date__gte=start)
        if end is not None:
            queryset = queryset.filter(date__lte=end)
        total = _sum(queryset)
        logger.debug("total_revenue %s..%s = %s", start, end, total)
        return total

    @staticmethod
    def daily_revenue(days=30, excluded_types=None):
        """
        Revenue per day for the last ``days`` days, today included.

        Days without charges are present with a zero total.

        Returns:
            list: ``[{'date': date, 'total': Decimal}, ...]`` oldest first.
        """
        if days <= 0:
            return []
        today = timezone.localdate()
        first_day = today - timedelta(days=days - 1)

        rows = (
            _charges(excluded_types)
            .filter(date__gte=_start_of_day(first_day))
            .annotate(day=TruncDate('date'))
            .values('day')
            .annotate(total=Sum('amount'))
        )
        totals = {row['day']: row['total'] for row in rows}

        return [
            {'date': day, 'total': totals.get(day, ZERO)}
            for day in (first_day + timedelta(days=offset) for offset in range(days))
        ]

    @staticmethod
    def revenue_by_service(excluded_types=None):
        """
        Revenue grouped by charge type.

        Sorted by total descending, ties broken by the service's display name.
        """
        labels = dict(Charge._meta.get_field('charge_type').choices)
        rows = (
            _charges(excluded_types)
            .values('charge_type')
            .annotate(total=Sum('amount'), count=Count('id'))
        )
        results = [
            {
                'service': row['charge_type'],
                'label': labels.get(row['charge_type'], row['charge_type']),
                'total': row['total'] or ZERO,
                'count': row['count'],
            }
            for row in rows
        ]
        results.sort(key=lambda r: (-r['total'], r['label']))
        return results

    @staticmethod
    def top_clients(top_n=3, excluded_types=None):
        """
        Owners with the highest total spend.

        Ties are ordered by owner name.
        """
        charge_filter = Q()
        if excluded_types:
            charge_filter = ~Q(charges__charge_type__in=list(excluded_types))

        owners = (
            DogOwner.objects
            .annotate(
                total=Coalesce(
                    Sum('charges__amount', filter=charge_filter),
                    ZERO,
                    output_field=DecimalField(max_digits=12, decimal_places=2),
                )
            )
            .order_by('-total', 'owner_name')[:top_n]
        )
        return [
            {'owner_id': str(owner.id), 'owner_name': owner.display_name, 'total': owner.total}
            for owner in owners
        ]

    @staticmethod
    def monthly_goal_progress(goal, excluded_types=None):
        """
        Revenue since the start of this month against ``goal``.

        Returns:
            dict: ``goal``, ``total`` and ``progress`` (0.0 to 1.0, capped).

        Raises:
            InvalidGoalAmountError: If ``goal`` is zero or negative.
        """
        goal = Decimal(goal)
        if goal <= 0:
            raise InvalidGoalAmountError("Revenue goal must be greater than zero")

        month_start = _start_of_day(timezone.localdate().replace(day=1))
        total = _sum(_charges(excluded_types).filter(date__gte=month_start))
        progress = min(float(total / goal), 1.0)
        return {'goal': goal, 'total': total, 'progress': progress}

    @staticmethod
    def revenue_growth(days=30, excluded_types=None) -> float:
        """
        Percent change of the last ``days`` days against the ``days`` before.

        Returns 100.0 when the previous period had no revenue.
        """
        now = timezone.now()
        period_start = now - timedelta(days=days)
        previous_start = now - timedelta(days=2 * days)
        charges = _charges(excluded_types)

        current = _sum(charges.filter(date__gte=period_start, date__lte=now))
        previous = _sum(charges.filter(date__gte=previous_start, date__lt=period_start))
        if previous <= 0:
            return 100.0
        return float((current - previous) / previous * 100)

    @staticmethod
    def dashboard(goal=None):
        """
        Summary of the business for the dashboard screen.

        Args:
            goal (Decimal, optional): Monthly revenue goal; progress is
                omitted when not given.
        """
        today = timezone.localdate()
        today_start = _start_of_day(today)
        now = timezone.now()

        outstanding = Charge.objects.filter(is_paid=False)
        upcoming = Appointment.objects.filter(
            status=AppointmentStatus.SCHEDULED,
            date__gt=now,
            date__lte=now + timedelta(days=7),
        )

        return {
            'revenue': {
                'today': RevenueQueries.total_revenue(start=today_start),
                'this_month': RevenueQueries.total_revenue(
                    start=_start_of_day(today.replace(day=1))
                ),
                'all_time': RevenueQueries.total_revenue(),
                'growth_percent': RevenueQueries.revenue_growth(),
            },
            'goal': RevenueQueries.monthly_goal_progress(goal) if goal else None,
            'appointments': {
                'today': Appointment.objects.filter(
                    date__gte=today_start,
                    date__lt=today_start + timedelta(days=1),
                ).count(),
                'upcoming_week': upcoming.count(),
            },
            'clients': {
                'active': DogOwner.objects.filter(is_active=True).count(),
                'total': DogOwner.objects.count(),
            },
            'outstanding': {
                'count': outstanding.count(),
                'total': _sum(outstanding),
            },
            'top_clients': RevenueQueries.top_clients(),
            'by_service': RevenueQueries.revenue_by_service(),
        }
