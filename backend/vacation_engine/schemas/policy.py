# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vacation_engine.models.enums import AccrualType

# ---------------------------------------------------------------------------
# Source records (supplied by the record service)
# ---------------------------------------------------------------------------


class OrganizationVacationPolicy(BaseModel):
    """Organization-wide vacation policy for a year.

    Day amounts arrive as decimal strings from storage and are parsed into
    ``Decimal`` so no float drift enters the balance arithmetic.
    """

    model_config = ConfigDict(frozen=True)

    default_annual_days: Decimal = Field(ge=0)
    allow_carryover: bool = False
    max_carryover_days: Decimal | None = Field(default=None, ge=0)
    carryover_expiry_months: int | None = Field(default=None, ge=1, le=12)
    accrual_type: AccrualType = AccrualType.ANNUAL
    accrual_start_month: int = Field(default=1, ge=1, le=12)


class EmployeeVacationAllowanceOverride(BaseModel):
    """Per-employee, per-year override. ``None`` means inherit the organization value."""

    model_config = ConfigDict(frozen=True)

    custom_annual_days: Decimal | None = Field(default=None, ge=0)
    custom_carryover_days: Decimal | None = Field(default=None, ge=0)


class VacationAdjustment(BaseModel):
    """Immutable audit record of a manual entitlement change."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    employee_id: uuid.UUID
    year: int
    days: Decimal = Field(description="Signed: positive adds days, negative deducts")
    reason: str | None = None
    adjusted_by: uuid.UUID
    created_at: datetime

    @model_validator(mode="after")
    def _require_reason(self) -> Self:
        if self.days != 0 and not (self.reason and self.reason.strip()):
            msg = "reason is required for non-zero adjustments"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Derived
# ---------------------------------------------------------------------------


class EffectivePolicy(BaseModel):
    """Organization policy merged with an employee override."""

    model_config = ConfigDict(frozen=True)

    annual_days: Decimal
    carryover_days_raw: Decimal = Decimal(0)
    allow_carryover: bool = False
    max_carryover_days: Decimal | None = None
    carryover_expiry_months: int | None = None


# ---------------------------------------------------------------------------
# API request schemas
# ---------------------------------------------------------------------------


class CreateAdjustmentRequest(BaseModel):
    """Request body for an admin vacation adjustment."""

    year: int = Field(ge=1900, le=9999)
    days: Decimal = Field(description="Signed: positive adds days, negative deducts")
    reason: str = Field(min_length=1, max_length=1000)
