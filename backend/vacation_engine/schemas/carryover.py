# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from vacation_engine.models.enums import ExpiryUrgency

# ---------------------------------------------------------------------------
# Year-end carryover
# ---------------------------------------------------------------------------


class CarryoverResult(BaseModel):
    """Carryover computed for a single employee at year end."""

    employee_id: uuid.UUID
    employee_name: str
    previous_year_remaining: Decimal
    carryover_applied: Decimal
    carryover_capped: bool
    expiry_date: date | None


class CarryoverError(BaseModel):
    """An employee whose carryover could not be computed."""

    employee_id: uuid.UUID
    error: str


class CarryoverSummary(BaseModel):
    """Result of an organization-wide year-end carryover run."""

    company_id: uuid.UUID
    from_year: int
    to_year: int
    processed_at: datetime
    employees_processed: int = 0
    total_days_carried_over: Decimal = Decimal(0)
    results: list[CarryoverResult] = []
    errors: list[CarryoverError] = []


# ---------------------------------------------------------------------------
# Carryover expiry
# ---------------------------------------------------------------------------


class ExpiredCarryover(BaseModel):
    """Carryover days removed from one employee."""

    employee_id: uuid.UUID
    employee_name: str
    days_expired: Decimal


class ExpiryResult(BaseModel):
    """Result of an organization-wide carryover expiry run."""

    employees_affected: int = 0
    days_expired: Decimal = Decimal(0)
    details: list[ExpiredCarryover] = []


# ---------------------------------------------------------------------------
# Expiration report
# ---------------------------------------------------------------------------


class ExpirationNotice(BaseModel):
    """Upcoming carryover expiration for one employee."""

    employee_id: uuid.UUID
    employee_name: str
    carryover_days: Decimal
    expires_at: date
    days_until_expiry: int
    urgency: ExpiryUrgency


class ExpirationReportResponse(BaseModel):
    """Carryover expiring within the requested window."""

    items: list[ExpirationNotice]
    total: int
