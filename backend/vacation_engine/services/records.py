# ruff: noqa: TC003
"""Record source for the balance engine.

Policies, overrides, adjustments, absences and holidays live in the host
platform's database. The engine only needs read access plus the two writes
made by carryover and accrual runs, expressed by ``VacationRecordService``.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from vacation_engine.schemas.absence import AbsenceEntry, HolidayPeriod
from vacation_engine.schemas.policy import (
    EmployeeVacationAllowanceOverride,
    OrganizationVacationPolicy,
    VacationAdjustment,
)
from vacation_engine.services.dates import date_ranges_overlap, get_year_range


class EmployeeInfo(BaseModel):
    """Employee metadata needed for balance reporting."""

    id: uuid.UUID
    company_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    hire_date: date | None = None  # for first-year proration and accrual

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@runtime_checkable
class VacationRecordService(Protocol):
    """Interface for the storage collaborator feeding the balance engine."""

    async def list_company_ids(self) -> list[uuid.UUID]:
        """List every company with vacation data."""
        ...

    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        ...

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        """List all employees for a company."""
        ...

    async def get_policy(self, company_id: uuid.UUID, year: int) -> OrganizationVacationPolicy | None:
        """Fetch the organization policy for a year. Returns None if not configured."""
        ...

    async def get_override(self, employee_id: uuid.UUID, year: int) -> EmployeeVacationAllowanceOverride | None:
        """Fetch an employee's allowance override for a year."""
        ...

    async def save_override(
        self,
        employee_id: uuid.UUID,
        year: int,
        override: EmployeeVacationAllowanceOverride,
    ) -> None:
        """Create or replace an employee's allowance override for a year."""
        ...

    async def list_adjustments(self, employee_id: uuid.UUID, year: int) -> list[VacationAdjustment]:
        """List adjustments recorded for an employee and year."""
        ...

    async def get_adjustment_total(self, employee_id: uuid.UUID, year: int) -> Decimal:
        """Sum of all adjustment days for an employee and year."""
        ...

    async def add_adjustment(self, adjustment: VacationAdjustment) -> None:
        """Record an adjustment."""
        ...

    async def list_absences(self, employee_id: uuid.UUID, year: int) -> list[AbsenceEntry]:
        """List an employee's absences that touch the given year."""
        ...

    async def list_holidays(self, company_id: uuid.UUID, start_date: date, end_date: date) -> list[HolidayPeriod]:
        """List holiday periods overlapping [start_date, end_date]."""
        ...


class InMemoryVacationRecordService:
    """In-memory stub implementation for development and tests."""

    def __init__(self) -> None:
        self._employees: dict[tuple[uuid.UUID, uuid.UUID], EmployeeInfo] = {}
        self._policies: dict[tuple[uuid.UUID, int], OrganizationVacationPolicy] = {}
        self._overrides: dict[tuple[uuid.UUID, int], EmployeeVacationAllowanceOverride] = {}
        self._adjustments: list[VacationAdjustment] = []
        self._absences: list[AbsenceEntry] = []
        self._holidays: dict[uuid.UUID, list[HolidayPeriod]] = {}

    # -- seeding ------------------------------------------------------------

    def seed_employee(self, employee: EmployeeInfo) -> None:
        self._employees[(employee.company_id, employee.id)] = employee

    def seed_policy(self, company_id: uuid.UUID, year: int, policy: OrganizationVacationPolicy) -> None:
        self._policies[(company_id, year)] = policy

    def seed_override(self, employee_id: uuid.UUID, year: int, override: EmployeeVacationAllowanceOverride) -> None:
        self._overrides[(employee_id, year)] = override

    def seed_absence(self, absence: AbsenceEntry) -> None:
        if absence.employee_id is None:
            msg = "Seeded absences must carry an employee_id"
            raise ValueError(msg)
        self._absences.append(absence)

    def seed_holiday(self, company_id: uuid.UUID, holiday: HolidayPeriod) -> None:
        self._holidays.setdefault(company_id, []).append(holiday)

    # -- VacationRecordService ----------------------------------------------

    async def list_company_ids(self) -> list[uuid.UUID]:
        company_ids = {cid for cid, _ in self._employees} | {cid for cid, _ in self._policies}
        return sorted(company_ids)

    async def get_employee(self, company_id: uuid.UUID, employee_id: uuid.UUID) -> EmployeeInfo | None:
        return self._employees.get((company_id, employee_id))

    async def list_employees(self, company_id: uuid.UUID) -> list[EmployeeInfo]:
        return [e for e in self._employees.values() if e.company_id == company_id]

    async def get_policy(self, company_id: uuid.UUID, year: int) -> OrganizationVacationPolicy | None:
        return self._policies.get((company_id, year))

    async def get_override(self, employee_id: uuid.UUID, year: int) -> EmployeeVacationAllowanceOverride | None:
        return self._overrides.get((employee_id, year))

    async def save_override(
        self,
        employee_id: uuid.UUID,
        year: int,
        override: EmployeeVacationAllowanceOverride,
    ) -> None:
        self._overrides[(employee_id, year)] = override

    async def list_adjustments(self, employee_id: uuid.UUID, year: int) -> list[VacationAdjustment]:
        return [a for a in self._adjustments if a.employee_id == employee_id and a.year == year]

    async def get_adjustment_total(self, employee_id: uuid.UUID, year: int) -> Decimal:
        adjustments = await self.list_adjustments(employee_id, year)
        return sum((a.days for a in adjustments), Decimal(0))

    async def add_adjustment(self, adjustment: VacationAdjustment) -> None:
        self._adjustments.append(adjustment)

    async def list_absences(self, employee_id: uuid.UUID, year: int) -> list[AbsenceEntry]:
        year_start, year_end = get_year_range(year)
        return [
            a
            for a in self._absences
            if a.employee_id == employee_id and date_ranges_overlap(a.start_date, a.end_date, year_start, year_end)
        ]

    async def list_holidays(self, company_id: uuid.UUID, start_date: date, end_date: date) -> list[HolidayPeriod]:
        return [
            h
            for h in self._holidays.get(company_id, [])
            if date_ranges_overlap(h.start_date, h.end_date, start_date, end_date)
        ]


_record_service: VacationRecordService = InMemoryVacationRecordService()


def get_record_service() -> VacationRecordService:
    """FastAPI dependency for the vacation record service."""
    return _record_service


def set_record_service(service: VacationRecordService) -> None:
    """Override the service (for testing or production wiring)."""
    global _record_service
    _record_service = service
