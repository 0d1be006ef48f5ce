"""Accrual engine: monthly/biweekly accrual postings and accrual projections."""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from vacation_engine.models.enums import AccrualType
from vacation_engine.schemas.accrual import AccrualProjection
from vacation_engine.schemas.policy import VacationAdjustment
from vacation_engine.services.policy import resolve_effective_policy
from vacation_engine.services.proration import round_days
from vacation_engine.services.vacation import _require_employee, _require_policy, compute_employee_balance

if TYPE_CHECKING:
    from vacation_engine.schemas.balance import VacationBalance
    from vacation_engine.schemas.policy import OrganizationVacationPolicy
    from vacation_engine.services.records import VacationRecordService

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = uuid.UUID(int=0)

_MONTHS_PER_YEAR = 12
_BIWEEKLY_PERIODS_PER_YEAR = 26
_BIWEEKLY_PERIODS_PER_MONTH = 2
_PROJECTION_PRECISION = Decimal("0.1")


@dataclass
class AccrualRunResult:
    """Summary of a monthly accrual run."""

    year: int
    month: int
    employees_processed: int = 0
    skipped: int = 0
    total_days_accrued: Decimal = Decimal(0)


# ---------------------------------------------------------------------------
# Pure computation helpers
# ---------------------------------------------------------------------------


def calculate_period_accrual(annual_days: Decimal, accrual_type: AccrualType) -> Decimal:
    """Days accrued in one month for the accrual type. Unrounded.

    Annual policies grant everything up front and accrue nothing per month.
    Biweekly policies are approximated as two pay periods per month.
    """
    if accrual_type == AccrualType.MONTHLY:
        return annual_days / _MONTHS_PER_YEAR
    if accrual_type == AccrualType.BIWEEKLY:
        return annual_days / _BIWEEKLY_PERIODS_PER_YEAR * _BIWEEKLY_PERIODS_PER_MONTH
    return Decimal(0)


def calculate_monthly_accrual(
    annual_days: Decimal,
    accrual_type: AccrualType,
    year: int,
    month: int,
    hire_date: date | None = None,
) -> Decimal:
    """Days to post for ``month`` of ``year``, prorated for a mid-month hire.

    Employees hired after the month accrue nothing. Employees hired during the
    month accrue for the calendar days from their hire date to month end.
    """
    amount = calculate_period_accrual(annual_days, accrual_type)

    if hire_date is not None:
        _, days_in_month = calendar.monthrange(year, month)
        month_end = date(year, month, days_in_month)
        if hire_date > month_end:
            return Decimal(0)
        if hire_date.year == year and hire_date.month == month:
            days_worked = days_in_month - hire_date.day + 1
            amount = amount / days_in_month * days_worked

    return round_days(amount)


def project_accruals(
    policy: OrganizationVacationPolicy,
    balance: VacationBalance,
) -> list[AccrualProjection]:
    """Project cumulative accrual against current usage for each month of the year.

    The whole balance is the yearly amount. Annual policies credit it in the
    accrual start month; others credit it in equal monthly slices. Used
    includes pending requests. Figures are rounded half-up to one decimal.
    """
    annual_days = balance.total_days
    projected_used = balance.used_days + balance.pending_days
    monthly = calculate_period_accrual(annual_days, policy.accrual_type)

    projections: list[AccrualProjection] = []
    cumulative = Decimal(0)
    for month in range(1, _MONTHS_PER_YEAR + 1):
        if policy.accrual_type == AccrualType.ANNUAL:
            accrued = annual_days if month == policy.accrual_start_month else Decimal(0)
        else:
            accrued = monthly
        cumulative += accrued

        projections.append(
            AccrualProjection(
                month=month,
                month_name=calendar.month_name[month],
                accrued=round_days(accrued),
                cumulative_accrued=round_days(cumulative, _PROJECTION_PRECISION),
                projected_used=round_days(projected_used, _PROJECTION_PRECISION),
                projected_balance=round_days(cumulative - projected_used, _PROJECTION_PRECISION),
            )
        )
    return projections


# ---------------------------------------------------------------------------
# Organization runs
# ---------------------------------------------------------------------------


async def run_monthly_accrual(
    records: VacationRecordService,
    company_id: uuid.UUID,
    year: int,
    month: int,
    performed_by: uuid.UUID,
    *,
    now: datetime | None = None,
) -> AccrualRunResult:
    """Post one month's accrual as an adjustment for every employee of a company."""
    result = AccrualRunResult(year=year, month=month)
    policy = await _require_policy(records, company_id, year)

    if policy.accrual_type == AccrualType.ANNUAL:
        logger.info("Accrual type is annual, skipping monthly accrual: company=%s", company_id)
        return result

    created_at = now or datetime.now(UTC)
    period_label = f"{calendar.month_name[month]} {year}"

    for employee in await records.list_employees(company_id):
        override = await records.get_override(employee.id, year)
        effective = resolve_effective_policy(policy, override)
        amount = calculate_monthly_accrual(effective.annual_days, policy.accrual_type, year, month, employee.hire_date)

        if amount <= 0:
            result.skipped += 1
            continue

        await records.add_adjustment(
            VacationAdjustment(
                employee_id=employee.id,
                year=year,
                days=amount,
                reason=f"Monthly accrual for {period_label}: +{amount} days",
                adjusted_by=performed_by,
                created_at=created_at,
            )
        )
        result.employees_processed += 1
        result.total_days_accrued += amount

    logger.info(
        "Monthly accrual complete: company=%s period=%s processed=%d accrued=%s",
        company_id,
        period_label,
        result.employees_processed,
        result.total_days_accrued,
    )
    return result


async def get_accrual_projection(
    records: VacationRecordService,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
    current_date: date,
) -> list[AccrualProjection]:
    """Project an employee's accrual and balance month by month."""
    employee = await _require_employee(records, company_id, employee_id)
    policy = await _require_policy(records, company_id, year)
    computed = await compute_employee_balance(records, employee, policy, year, current_date)
    return project_accruals(policy, computed.balance)
