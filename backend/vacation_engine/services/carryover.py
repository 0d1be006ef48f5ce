"""Carryover engines.

Year-end carryover: rolls each employee's unused days into next year's
allowance override, capped by the policy maximum.
Expiry: once the carryover expiry date has passed, zeroes out carried days.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from vacation_engine.models.enums import ExpiryUrgency
from vacation_engine.schemas.carryover import (
    CarryoverError,
    CarryoverResult,
    CarryoverSummary,
    ExpirationNotice,
    ExpirationReportResponse,
    ExpiredCarryover,
    ExpiryResult,
)
from vacation_engine.schemas.policy import EmployeeVacationAllowanceOverride
from vacation_engine.services.dates import calculate_carryover_expiry_date
from vacation_engine.services.vacation import _require_policy, compute_employee_balance

if TYPE_CHECKING:
    import uuid

    from vacation_engine.services.records import VacationRecordService

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure computation helpers
# ---------------------------------------------------------------------------


def calculate_carryover_amount(
    remaining_days: Decimal,
    max_carryover_days: Decimal | None,
) -> tuple[Decimal, bool]:
    """Return (days carried over, whether the cap cut anything off).

    Negative remaining balances carry nothing. Without a cap everything carries.
    """
    remaining = max(Decimal(0), remaining_days)
    if max_carryover_days is None:
        return remaining, False
    return min(remaining, max_carryover_days), remaining > max_carryover_days


def classify_expiry_urgency(
    days_until_expiry: int,
    critical_days: int = 7,
    warning_days: int = 30,
) -> ExpiryUrgency:
    """Bucket the days left before carryover expires."""
    if days_until_expiry <= critical_days:
        return ExpiryUrgency.CRITICAL
    if days_until_expiry <= warning_days:
        return ExpiryUrgency.WARNING
    return ExpiryUrgency.INFO


# ---------------------------------------------------------------------------
# Year-end carryover
# ---------------------------------------------------------------------------


async def run_annual_carryover(
    records: VacationRecordService,
    company_id: uuid.UUID,
    from_year: int,
    *,
    now: datetime | None = None,
) -> CarryoverSummary:
    """Carry unused ``from_year`` days into each employee's ``from_year + 1`` override.

    The source-year balance is taken as of Dec 31, so carryover that already
    expired during that year is not rolled again. Only approved absences reduce
    what carries over. Failures are collected per employee and do not stop the run.
    """
    to_year = from_year + 1
    processed_at = now or datetime.now(UTC)
    summary = CarryoverSummary(
        company_id=company_id,
        from_year=from_year,
        to_year=to_year,
        processed_at=processed_at,
    )

    logger.info("Starting annual carryover: company=%s from=%d to=%d", company_id, from_year, to_year)

    from_policy = await _require_policy(records, company_id, from_year)
    if not from_policy.allow_carryover:
        logger.info("Carryover not allowed by policy: company=%s year=%d", company_id, from_year)
        return summary

    to_policy = await records.get_policy(company_id, to_year)
    expiry_months = to_policy.carryover_expiry_months if to_policy is not None else None
    expiry_date = calculate_carryover_expiry_date(to_year, expiry_months)
    year_end = date(from_year, 12, 31)

    for employee in await records.list_employees(company_id):
        try:
            computed = await compute_employee_balance(records, employee, from_policy, from_year, year_end)
            remaining = max(Decimal(0), computed.balance.total_days - computed.balance.used_days)
            applied, capped = calculate_carryover_amount(remaining, from_policy.max_carryover_days)

            existing = await records.get_override(employee.id, to_year)
            # An existing override is refreshed even to 0 so a re-run replaces stale carryover.
            if applied > 0 or existing is not None:
                override = (existing or EmployeeVacationAllowanceOverride()).model_copy(
                    update={"custom_carryover_days": applied}
                )
                await records.save_override(employee.id, to_year, override)

            summary.results.append(
                CarryoverResult(
                    employee_id=employee.id,
                    employee_name=employee.name,
                    previous_year_remaining=remaining,
                    carryover_applied=applied,
                    carryover_capped=capped,
                    expiry_date=expiry_date,
                )
            )
        except Exception as exc:
            logger.exception("Carryover failed for employee=%s", employee.id)
            summary.errors.append(CarryoverError(employee_id=employee.id, error=str(exc)))

    summary.employees_processed = len(summary.results)
    summary.total_days_carried_over = sum((r.carryover_applied for r in summary.results), Decimal(0))

    logger.info(
        "Annual carryover complete: company=%s processed=%d carried=%s errors=%d",
        company_id,
        summary.employees_processed,
        summary.total_days_carried_over,
        len(summary.errors),
    )
    return summary


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


async def expire_carryover(
    records: VacationRecordService,
    company_id: uuid.UUID,
    current_date: date,
) -> ExpiryResult:
    """Zero out carried-over days once the current year's expiry date has passed.

    Carryover is still usable on the expiry date itself, so nothing expires
    until the day after.
    """
    result = ExpiryResult()
    year = current_date.year

    policy = await records.get_policy(company_id, year)
    if policy is None or not policy.allow_carryover or policy.carryover_expiry_months is None:
        return result

    expiry_date = calculate_carryover_expiry_date(year, policy.carryover_expiry_months)
    if expiry_date is None or current_date <= expiry_date:
        logger.info("Carryover not yet expired: company=%s expiry=%s", company_id, expiry_date)
        return result

    for employee in await records.list_employees(company_id):
        override = await records.get_override(employee.id, year)
        if override is None or override.custom_carryover_days is None or override.custom_carryover_days <= 0:
            continue

        days_expired = override.custom_carryover_days
        await records.save_override(
            employee.id,
            year,
            override.model_copy(update={"custom_carryover_days": Decimal(0)}),
        )
        result.details.append(
            ExpiredCarryover(employee_id=employee.id, employee_name=employee.name, days_expired=days_expired)
        )

    result.employees_affected = len(result.details)
    result.days_expired = sum((d.days_expired for d in result.details), Decimal(0))

    logger.info(
        "Carryover expiry complete: company=%s affected=%d expired=%s",
        company_id,
        result.employees_affected,
        result.days_expired,
    )
    return result


async def get_expiration_report(
    records: VacationRecordService,
    company_id: uuid.UUID,
    year: int,
    current_date: date,
    days_ahead: int = 90,
    *,
    critical_days: int = 7,
    warning_days: int = 30,
) -> ExpirationReportResponse:
    """List employees whose carryover expires within ``days_ahead`` days of ``current_date``."""
    policy = await _require_policy(records, company_id, year)
    notices: list[ExpirationNotice] = []

    for employee in await records.list_employees(company_id):
        computed = await compute_employee_balance(records, employee, policy, year, current_date)
        balance = computed.balance
        if not balance.carryover_days or balance.carryover_expiry_date is None:
            continue

        days_until = (balance.carryover_expiry_date - current_date).days
        if days_until > days_ahead:
            continue

        notices.append(
            ExpirationNotice(
                employee_id=employee.id,
                employee_name=employee.name,
                carryover_days=balance.carryover_days,
                expires_at=balance.carryover_expiry_date,
                days_until_expiry=days_until,
                urgency=classify_expiry_urgency(days_until, critical_days, warning_days),
            )
        )

    notices.sort(key=lambda n: (n.days_until_expiry, n.employee_name))
    return ExpirationReportResponse(items=notices, total=len(notices))
