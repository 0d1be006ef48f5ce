# ruff: noqa: TC003
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class AccrualProjection(BaseModel):
    """Projected accrual and balance at one month of the year."""

    month: int
    month_name: str
    accrued: Decimal
    cumulative_accrued: Decimal
    projected_used: Decimal
    projected_balance: Decimal


class AccrualProjectionResponse(BaseModel):
    """Twelve monthly projection rows for an employee."""

    year: int
    items: list[AccrualProjection]


class AccrualRunResponse(BaseModel):
    """Summary of a monthly accrual run."""

    year: int
    month: int
    employees_processed: int
    total_days_accrued: Decimal
