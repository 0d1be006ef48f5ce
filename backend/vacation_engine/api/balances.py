# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from vacation_engine.api.deps import AdminDep, AuthDep, RecordsDep, SettingsDep, validate_company_scope
from vacation_engine.schemas.accrual import AccrualProjectionResponse
from vacation_engine.schemas.balance import BalanceCheckRequest, BalanceCheckResponse, EnhancedVacationBalance
from vacation_engine.schemas.policy import CreateAdjustmentRequest, VacationAdjustment
from vacation_engine.services import accrual as accrual_service
from vacation_engine.services import vacation as vacation_service

employee_vacation_router = APIRouter(
    prefix="/companies/{company_id}/employees/{employee_id}/vacation",
    tags=["balances"],
    dependencies=[Depends(validate_company_scope)],
)


@employee_vacation_router.get("/balance", response_model=EnhancedVacationBalance)
async def get_vacation_balance(
    employee_id: uuid.UUID,
    records: RecordsDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
    current_date: date | None = Query(default=None),
) -> EnhancedVacationBalance:
    """Get an employee's vacation balance for a year (defaults to the current year)."""
    today = current_date or date.today()
    return await vacation_service.get_enhanced_balance(
        records, auth.company_id, employee_id, year or today.year, today
    )


@employee_vacation_router.post("/check", response_model=BalanceCheckResponse)
async def check_vacation_request(
    employee_id: uuid.UUID,
    payload: BalanceCheckRequest,
    records: RecordsDep,
    settings: SettingsDep,
    auth: AuthDep,
) -> BalanceCheckResponse:
    """Check whether a prospective absence fits the employee's remaining balance."""
    return await vacation_service.check_absence_request(
        records,
        auth.company_id,
        employee_id,
        payload,
        payload.current_date or date.today(),
        settings.sufficiency_tolerance,
    )


@employee_vacation_router.get("/projection", response_model=AccrualProjectionResponse)
async def get_accrual_projection(
    employee_id: uuid.UUID,
    records: RecordsDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
    current_date: date | None = Query(default=None),
) -> AccrualProjectionResponse:
    """Project an employee's accrual and balance for each month of a year."""
    today = current_date or date.today()
    target_year = year or today.year
    items = await accrual_service.get_accrual_projection(records, auth.company_id, employee_id, target_year, today)
    return AccrualProjectionResponse(year=target_year, items=items)


@employee_vacation_router.post(
    "/adjustments",
    response_model=VacationAdjustment,
    status_code=status.HTTP_201_CREATED,
)
async def create_adjustment(
    employee_id: uuid.UUID,
    payload: CreateAdjustmentRequest,
    records: RecordsDep,
    auth: AdminDep,
) -> VacationAdjustment:
    """Record a manual vacation adjustment (admin only)."""
    return await vacation_service.create_adjustment(records, auth, employee_id, payload)
