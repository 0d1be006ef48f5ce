from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from vacation_engine.services.dates import get_year_range

# Precision for prorated and accrued day amounts.
DAY_PRECISION = Decimal("0.01")


def round_days(value: Decimal, precision: Decimal = DAY_PRECISION) -> Decimal:
    """Round a day amount half-up to ``precision``."""
    return value.quantize(precision, rounding=ROUND_HALF_UP)


def prorate_annual_days(annual_days: Decimal, start_date: date, target_year: int) -> Decimal:
    """Scale ``annual_days`` to the part of ``target_year`` from ``start_date`` onwards.

    Employees who started on or before Jan 1 get the full amount, employees
    starting after Dec 31 get nothing. Otherwise the amount is multiplied by
    the share of the year's calendar days (365 or 366) remaining from the
    start date, inclusive, and rounded half-up to two decimal places.
    """
    year_start, year_end = get_year_range(target_year)

    if start_date <= year_start:
        return annual_days
    if start_date > year_end:
        return Decimal(0)

    days_in_year = (year_end - year_start).days + 1
    days_employed = (year_end - start_date).days + 1
    return round_days(annual_days * Decimal(days_employed) / Decimal(days_in_year))
