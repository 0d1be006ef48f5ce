# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vacation_engine.models.enums import DayPeriod

# ---------------------------------------------------------------------------
# Balance snapshots
# ---------------------------------------------------------------------------


class VacationBalance(BaseModel):
    """Point-in-time vacation balance for one employee and year. Never persisted."""

    model_config = ConfigDict(frozen=True)

    year: int
    total_days: Decimal
    used_days: Decimal
    pending_days: Decimal
    remaining_days: Decimal  # may go negative; callers decide how to present it
    carryover_days: Decimal | None = None
    carryover_expiry_date: date | None = None


class EnhancedVacationBalance(VacationBalance):
    """Balance plus the breakdown shown on the employee vacation page."""

    base_allowance: Decimal
    adjustments: Decimal
    carryover_expiring: Decimal = Decimal(0)
    carryover_expiry_days_remaining: int | None = None
    available: Decimal


# ---------------------------------------------------------------------------
# Request check
# ---------------------------------------------------------------------------


class BalanceCheckRequest(BaseModel):
    """Request body for checking whether a prospective absence fits the balance."""

    start_date: date
    start_period: DayPeriod = DayPeriod.FULL_DAY
    end_date: date
    end_period: DayPeriod = DayPeriod.FULL_DAY
    year: int | None = Field(default=None, ge=1900, le=9999)
    current_date: date | None = None

    @model_validator(mode="after")
    def _validate_range(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must not be before start_date"
            raise ValueError(msg)
        return self


class BalanceCheckResponse(BaseModel):
    """Outcome of a balance check for a prospective absence."""

    requested_days: Decimal
    remaining_days: Decimal
    sufficient: bool
    message: str | None = None
    conflicting_absence_ids: list[uuid.UUID] = []


# ---------------------------------------------------------------------------
# Organization summary
# ---------------------------------------------------------------------------


class VacationSummaryRow(BaseModel):
    """One employee's line in the organization vacation summary."""

    employee_id: uuid.UUID
    employee_name: str
    total_allowance: Decimal
    carryover: Decimal
    adjustments: Decimal
    used: Decimal
    pending: Decimal
    remaining: Decimal
    carryover_expiry_date: date | None
    utilization_rate: int  # percent of total_allowance used or pending


class VacationSummaryResponse(BaseModel):
    """Vacation summary for every employee of a company."""

    year: int
    items: list[VacationSummaryRow]
    total: int
