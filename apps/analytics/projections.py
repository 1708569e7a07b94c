"""Compound-growth projections for financial planning."""

from decimal import Decimal, ROUND_HALF_UP
from typing import List

from apps.audit.buffer import get_audit_log
from .exceptions import InvalidProjectionError

CENT = Decimal('0.01')


def project_growth(initial, annual_return_pct, years: int, actor=None) -> List[Decimal]:
    """
    Value of ``initial`` after each year of compound growth.

    Returns ``years + 1`` values: year 0 (the initial amount) through
    ``years``, each ``initial * (1 + r/100) ** year`` rounded to cents.

    Raises:
        InvalidProjectionError: If ``years`` is negative
    """
    if years < 0:
        raise InvalidProjectionError("Projection years must be zero or more")

    log = get_audit_log('financial_modeling')
    log.record('calculate_start', actor=actor, years=years)

    initial = Decimal(initial)
    growth = Decimal(1) + Decimal(annual_return_pct) / Decimal(100)
    values = [(initial * growth ** year).quantize(CENT, rounding=ROUND_HALF_UP) for year in range(years + 1)]

    log.record('calculate_complete', actor=actor, results=len(values))
    return values
