# ruff: noqa: TC003
"""Vacation service: loads records for an employee and runs the balance engine."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from vacation_engine.exceptions import NotFoundError
from vacation_engine.models.enums import AbsenceStatus
from vacation_engine.schemas.absence import AbsenceEntry
from vacation_engine.schemas.balance import (
    BalanceCheckResponse,
    EnhancedVacationBalance,
    VacationSummaryResponse,
    VacationSummaryRow,
)
from vacation_engine.schemas.policy import VacationAdjustment
from vacation_engine.services.balance import (
    DEFAULT_SUFFICIENCY_TOLERANCE,
    calculate_absence_days,
    calculate_vacation_balance,
    enhance_balance,
    has_sufficient_balance,
)
from vacation_engine.services.dates import date_ranges_overlap, get_year_range
from vacation_engine.services.policy import resolve_effective_policy
from vacation_engine.services.proration import prorate_annual_days

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vacation_engine.schemas.auth import AuthContext
    from vacation_engine.schemas.balance import BalanceCheckRequest, VacationBalance
    from vacation_engine.schemas.policy import (
        CreateAdjustmentRequest,
        EffectivePolicy,
        OrganizationVacationPolicy,
    )
    from vacation_engine.services.records import EmployeeInfo, VacationRecordService

logger = logging.getLogger(__name__)

# Statuses that occupy the calendar for conflict detection.
_ACTIVE_STATUSES = frozenset({AbsenceStatus.PENDING, AbsenceStatus.APPROVED})


@dataclass
class EmployeeBalance:
    """An employee's computed balance together with the inputs that produced it."""

    employee: EmployeeInfo
    policy: OrganizationVacationPolicy
    effective_policy: EffectivePolicy
    adjustment_total: Decimal
    absences: list[AbsenceEntry]
    balance: VacationBalance


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def find_conflicting_absences(
    start_date: date,
    end_date: date,
    absences: Iterable[AbsenceEntry],
) -> list[AbsenceEntry]:
    """Return pending or approved absences overlapping [start_date, end_date]."""
    return [
        a
        for a in absences
        if a.status in _ACTIVE_STATUSES and date_ranges_overlap(start_date, end_date, a.start_date, a.end_date)
    ]


def calculate_utilization_rate(booked: Decimal, total: Decimal) -> int:
    """Percent of the total allowance booked (used or pending), rounded half-up. 0 without an allowance."""
    if total <= 0:
        return 0
    return int((booked / total * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Record loading
# ---------------------------------------------------------------------------


async def _require_employee(
    records: VacationRecordService,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
) -> EmployeeInfo:
    employee = await records.get_employee(company_id, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def _require_policy(
    records: VacationRecordService,
    company_id: uuid.UUID,
    year: int,
) -> OrganizationVacationPolicy:
    policy = await records.get_policy(company_id, year)
    if policy is None:
        logger.warning("No vacation policy found for company=%s year=%d", company_id, year)
        raise NotFoundError(f"No vacation policy configured for {year}")
    return policy


async def compute_employee_balance(
    records: VacationRecordService,
    employee: EmployeeInfo,
    policy: OrganizationVacationPolicy,
    year: int,
    current_date: date,
) -> EmployeeBalance:
    """Fetch an employee's records for ``year`` and compute the balance.

    New hires get their annual entitlement prorated from the hire date before
    the balance is computed.
    """
    override = await records.get_override(employee.id, year)
    effective = resolve_effective_policy(policy, override)
    if employee.hire_date is not None:
        prorated = prorate_annual_days(effective.annual_days, employee.hire_date, year)
        if prorated != effective.annual_days:
            effective = effective.model_copy(update={"annual_days": prorated})

    adjustment_total = await records.get_adjustment_total(employee.id, year)
    absences = await records.list_absences(employee.id, year)
    # Absences crossing the year boundary are counted whole, so holidays are
    # needed for their full span.
    holidays_start, holidays_end = get_year_range(year)
    for absence in absences:
        holidays_start = min(holidays_start, absence.start_date)
        holidays_end = max(holidays_end, absence.end_date)
    holidays = await records.list_holidays(employee.company_id, holidays_start, holidays_end)

    balance = calculate_vacation_balance(effective, absences, adjustment_total, current_date, year, holidays)
    return EmployeeBalance(
        employee=employee,
        policy=policy,
        effective_policy=effective,
        adjustment_total=adjustment_total,
        absences=absences,
        balance=balance,
    )


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------


async def get_enhanced_balance(
    records: VacationRecordService,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    year: int,
    current_date: date,
) -> EnhancedVacationBalance:
    """Compute an employee's balance with allowance breakdown and expiry countdown."""
    employee = await _require_employee(records, company_id, employee_id)
    policy = await _require_policy(records, company_id, year)
    computed = await compute_employee_balance(records, employee, policy, year, current_date)
    return enhance_balance(computed.balance, computed.effective_policy, computed.adjustment_total, current_date)


async def check_absence_request(
    records: VacationRecordService,
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    payload: BalanceCheckRequest,
    current_date: date,
    tolerance: Decimal = DEFAULT_SUFFICIENCY_TOLERANCE,
) -> BalanceCheckResponse:
    """Check whether a prospective absence fits the employee's remaining balance.

    Holidays for the requested range are excluded from the requested day count,
    and overlapping pending or approved absences are reported as conflicts.
    """
    year = payload.year or payload.start_date.year
    employee = await _require_employee(records, company_id, employee_id)
    policy = await _require_policy(records, company_id, year)
    computed = await compute_employee_balance(records, employee, policy, year, current_date)

    holidays = await records.list_holidays(company_id, payload.start_date, payload.end_date)
    requested = AbsenceEntry(
        employee_id=employee_id,
        start_date=payload.start_date,
        start_period=payload.start_period,
        end_date=payload.end_date,
        end_period=payload.end_period,
    )
    requested_days = calculate_absence_days(requested, holidays)
    sufficient = has_sufficient_balance(computed.balance, requested_days, tolerance)
    conflicts = find_conflicting_absences(payload.start_date, payload.end_date, computed.absences)

    message = None
    if not sufficient:
        message = (
            f"Insufficient vacation balance: requested {requested_days} days, "
            f"{computed.balance.remaining_days} remaining"
        )

    return BalanceCheckResponse(
        requested_days=requested_days,
        remaining_days=computed.balance.remaining_days,
        sufficient=sufficient,
        message=message,
        conflicting_absence_ids=[a.id for a in conflicts],
    )


async def get_vacation_summary(
    records: VacationRecordService,
    company_id: uuid.UUID,
    year: int,
    current_date: date,
) -> VacationSummaryResponse:
    """Summarize every employee's balance for a company and year."""
    policy = await _require_policy(records, company_id, year)
    rows: list[VacationSummaryRow] = []

    for employee in await records.list_employees(company_id):
        computed = await compute_employee_balance(records, employee, policy, year, current_date)
        balance = computed.balance
        rows.append(
            VacationSummaryRow(
                employee_id=employee.id,
                employee_name=employee.name,
                total_allowance=balance.total_days,
                carryover=balance.carryover_days or Decimal(0),
                adjustments=computed.adjustment_total,
                used=balance.used_days,
                pending=balance.pending_days,
                remaining=balance.remaining_days,
                carryover_expiry_date=balance.carryover_expiry_date,
                utilization_rate=calculate_utilization_rate(
                    balance.used_days + balance.pending_days, balance.total_days
                ),
            )
        )

    return VacationSummaryResponse(year=year, items=rows, total=len(rows))


async def create_adjustment(
    records: VacationRecordService,
    auth: AuthContext,
    employee_id: uuid.UUID,
    payload: CreateAdjustmentRequest,
    now: datetime | None = None,
) -> VacationAdjustment:
    """Record a manual entitlement adjustment for an employee."""
    await _require_employee(records, auth.company_id, employee_id)

    adjustment = VacationAdjustment(
        employee_id=employee_id,
        year=payload.year,
        days=payload.days,
        reason=payload.reason,
        adjusted_by=auth.user_id,
        created_at=now or datetime.now(UTC),
    )
    await records.add_adjustment(adjustment)

    logger.info(
        "Vacation adjustment recorded: employee=%s year=%d days=%s by=%s",
        employee_id,
        payload.year,
        payload.days,
        auth.user_id,
    )
    return adjustment
