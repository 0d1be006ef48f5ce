"""Vacation balance calculation.

Pure functions over already-fetched records: the effective policy, the
employee's absences for the year, the summed adjustments and the holiday
calendar. Nothing here reads the clock or touches storage; ``current_date``
is always supplied by the caller.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from vacation_engine.models.enums import AbsenceStatus, DayPeriod
from vacation_engine.schemas.balance import EnhancedVacationBalance, VacationBalance
from vacation_engine.services.dates import calculate_business_days, calculate_carryover_expiry_date

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vacation_engine.schemas.absence import AbsenceEntry, HolidayPeriod
    from vacation_engine.schemas.policy import EffectivePolicy

# Share of a day each boundary period covers.
PERIOD_DAY_FRACTION: dict[DayPeriod, Decimal] = {
    DayPeriod.FULL_DAY: Decimal(1),
    DayPeriod.AM: Decimal("0.5"),
    DayPeriod.PM: Decimal("0.5"),
}

DEFAULT_SUFFICIENCY_TOLERANCE = Decimal("0.000001")


def calculate_absence_days(absence: AbsenceEntry, holidays: Iterable[HolidayPeriod] = ()) -> Decimal:
    """Return how many vacation days an absence consumes.

    A single-day absence is one day, or half a day if either boundary is a
    half-day period. A multi-day absence counts business days in the range and
    loses half a day for each half-day boundary. A reversed range consumes nothing.
    """
    if absence.start_date > absence.end_date:
        return Decimal(0)

    start_fraction = PERIOD_DAY_FRACTION[absence.start_period]
    end_fraction = PERIOD_DAY_FRACTION[absence.end_period]

    if absence.start_date == absence.end_date:
        return min(start_fraction, end_fraction)

    days = Decimal(calculate_business_days(absence.start_date, absence.end_date, holidays))
    days -= Decimal(1) - start_fraction
    days -= Decimal(1) - end_fraction
    return days


def _valid_carryover(policy: EffectivePolicy, year: int, current_date: date) -> tuple[Decimal | None, date | None]:
    """Return (carryover_days, expiry_date) if carryover applies on current_date, else (None, None)."""
    if not policy.allow_carryover or policy.carryover_days_raw <= 0:
        return None, None

    expiry = calculate_carryover_expiry_date(year, policy.carryover_expiry_months)
    if expiry is not None and current_date > expiry:
        return None, None
    return policy.carryover_days_raw, expiry


def calculate_vacation_balance(
    policy: EffectivePolicy,
    absences: Iterable[AbsenceEntry],
    adjustment_total: Decimal,
    current_date: date,
    year: int,
    holidays: Iterable[HolidayPeriod] = (),
) -> VacationBalance:
    """Compute the vacation balance for one employee and year.

    ``policy.annual_days`` is used as-is: first-year proration is applied by the
    caller before resolving the policy. Remaining days are never clamped.
    """
    holidays = list(holidays)
    carryover_days, carryover_expiry_date = _valid_carryover(policy, year, current_date)

    total_days = policy.annual_days + (carryover_days or Decimal(0)) + adjustment_total

    used_days = Decimal(0)
    pending_days = Decimal(0)
    for absence in absences:
        if not absence.category.counts_against_vacation:
            continue
        if absence.status == AbsenceStatus.APPROVED:
            used_days += calculate_absence_days(absence, holidays)
        elif absence.status == AbsenceStatus.PENDING:
            pending_days += calculate_absence_days(absence, holidays)

    return VacationBalance(
        year=year,
        total_days=total_days,
        used_days=used_days,
        pending_days=pending_days,
        remaining_days=total_days - used_days - pending_days,
        carryover_days=carryover_days,
        carryover_expiry_date=carryover_expiry_date,
    )


def has_sufficient_balance(
    balance: VacationBalance,
    requested_days: Decimal,
    tolerance: Decimal = DEFAULT_SUFFICIENCY_TOLERANCE,
) -> bool:
    """Return True if ``requested_days`` fit in the remaining balance.

    ``tolerance`` absorbs representation error in amounts converted from floats.
    """
    return balance.remaining_days >= requested_days - tolerance


def enhance_balance(
    balance: VacationBalance,
    policy: EffectivePolicy,
    adjustment_total: Decimal,
    current_date: date,
) -> EnhancedVacationBalance:
    """Add the allowance breakdown and expiry countdown to a balance."""
    carryover_expiring = Decimal(0)
    days_remaining: int | None = None

    expiry = balance.carryover_expiry_date
    if balance.carryover_days and expiry is not None and current_date < expiry:
        carryover_expiring = balance.carryover_days
        days_remaining = (expiry - current_date).days

    return EnhancedVacationBalance(
        **balance.model_dump(),
        base_allowance=policy.annual_days,
        adjustments=adjustment_total,
        carryover_expiring=carryover_expiring,
        carryover_expiry_days_remaining=days_remaining,
        available=balance.remaining_days,
    )
