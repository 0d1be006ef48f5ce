"""Calendar arithmetic: range overlap, business days, carryover expiry."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vacation_engine.schemas.absence import HolidayPeriod

_ONE_DAY = timedelta(days=1)
_SATURDAY = 5


def date_ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Return True if the closed ranges [a_start, a_end] and [b_start, b_end] share a day.

    Adjacent ranges (one ends the day before the other starts) do not overlap.
    """
    return a_start <= b_end and b_start <= a_end


def _is_holiday(day: date, holidays: Iterable[HolidayPeriod]) -> bool:
    return any(date_ranges_overlap(day, day, h.start_date, h.end_date) for h in holidays)


def calculate_business_days(
    start_date: date,
    end_date: date,
    holidays: Iterable[HolidayPeriod] = (),
) -> int:
    """Count Mon-Fri dates in [start_date, end_date] not covered by a holiday period.

    Returns 0 when start_date is after end_date.
    """
    if start_date > end_date:
        return 0

    # Only holidays touching the range can exclude anything.
    relevant = [h for h in holidays if date_ranges_overlap(start_date, end_date, h.start_date, h.end_date)]

    count = 0
    current = start_date
    while current <= end_date:
        if current.weekday() < _SATURDAY and not _is_holiday(current, relevant):
            count += 1
        current += _ONE_DAY
    return count


def calculate_carryover_expiry_date(year: int, expiry_months: int | None) -> date | None:
    """Return the last day of month ``expiry_months`` in ``year``.

    ``None`` means carryover never expires. Computed as the first day of the
    following month minus one day, so month lengths and leap years need no table.
    """
    if expiry_months is None:
        return None
    if expiry_months == 12:
        first_of_next = date(year + 1, 1, 1)
    else:
        first_of_next = date(year, expiry_months + 1, 1)
    return first_of_next - _ONE_DAY


def get_year_range(year: int) -> tuple[date, date]:
    """Return (Jan 1, Dec 31) of ``year``."""
    return date(year, 1, 1), date(year, 12, 31)
