# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from vacation_engine.models.enums import AbsenceStatus, DayPeriod


class AbsenceCategory(BaseModel):
    """Category of an absence; only some categories draw down vacation."""

    model_config = ConfigDict(frozen=True)

    name: str = "Vacation"
    counts_against_vacation: bool = True


class AbsenceEntry(BaseModel):
    """An absence request as consumed by the balance engine."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    employee_id: uuid.UUID | None = None
    start_date: date
    start_period: DayPeriod = DayPeriod.FULL_DAY
    end_date: date
    end_period: DayPeriod = DayPeriod.FULL_DAY
    status: AbsenceStatus = AbsenceStatus.PENDING
    category: AbsenceCategory = Field(default_factory=AbsenceCategory)


class HolidayPeriod(BaseModel):
    """A closed range of calendar days excluded from business-day counts."""

    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    name: str | None = None
