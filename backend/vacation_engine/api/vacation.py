# ruff: noqa: B008, TC001, TC003
"""Company-wide vacation endpoints: summaries, expirations, carryover and accrual runs."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from vacation_engine.api.deps import AdminDep, AuthDep, RecordsDep, SettingsDep, validate_company_scope
from vacation_engine.schemas.accrual import AccrualRunResponse
from vacation_engine.schemas.balance import VacationSummaryResponse
from vacation_engine.schemas.carryover import CarryoverSummary, ExpirationReportResponse, ExpiryResult
from vacation_engine.services import accrual as accrual_service
from vacation_engine.services import carryover as carryover_service
from vacation_engine.services import vacation as vacation_service

company_vacation_router = APIRouter(
    prefix="/companies/{company_id}/vacation",
    tags=["vacation"],
    dependencies=[Depends(validate_company_scope)],
)


@company_vacation_router.get("/summary", response_model=VacationSummaryResponse)
async def get_vacation_summary(
    records: RecordsDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
    current_date: date | None = Query(default=None),
) -> VacationSummaryResponse:
    """Per-employee vacation summary for a company."""
    today = current_date or date.today()
    return await vacation_service.get_vacation_summary(records, auth.company_id, year or today.year, today)


@company_vacation_router.get("/expirations", response_model=ExpirationReportResponse)
async def get_expiring_carryover(
    records: RecordsDep,
    settings: SettingsDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
    days_ahead: int | None = Query(default=None, ge=0, le=366),
    current_date: date | None = Query(default=None),
) -> ExpirationReportResponse:
    """Carryover balances expiring within the next ``days_ahead`` days."""
    today = current_date or date.today()
    return await carryover_service.get_expiration_report(
        records,
        auth.company_id,
        year or today.year,
        today,
        days_ahead if days_ahead is not None else settings.expiry_report_days_ahead,
        critical_days=settings.expiry_critical_days,
        warning_days=settings.expiry_warning_days,
    )


@company_vacation_router.post("/carryover", response_model=CarryoverSummary)
async def run_carryover(
    records: RecordsDep,
    auth: AdminDep,
    from_year: int = Query(ge=1900, le=9998),
) -> CarryoverSummary:
    """Roll unused days of ``from_year`` into the following year (admin only)."""
    return await carryover_service.run_annual_carryover(records, auth.company_id, from_year)


@company_vacation_router.post("/carryover/expire", response_model=ExpiryResult)
async def expire_carryover(
    records: RecordsDep,
    auth: AdminDep,
    current_date: date | None = Query(default=None),
) -> ExpiryResult:
    """Remove carryover whose expiry date has passed (admin only)."""
    return await carryover_service.expire_carryover(records, auth.company_id, current_date or date.today())


@company_vacation_router.post("/accruals", response_model=AccrualRunResponse)
async def trigger_accruals(
    records: RecordsDep,
    auth: AdminDep,
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
) -> AccrualRunResponse:
    """Post a month's accrual for every employee (admin only).

    Useful for backfills. Policies with annual accrual post nothing.
    """
    result = await accrual_service.run_monthly_accrual(records, auth.company_id, year, month, auth.user_id)
    return AccrualRunResponse(
        year=result.year,
        month=result.month,
        employees_processed=result.employees_processed,
        total_days_accrued=result.total_days_accrued,
    )
