"""Tests for year-end carryover, carryover expiry and the expiration report."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from vacation_engine.exceptions import NotFoundError
from vacation_engine.models.enums import AbsenceStatus, ExpiryUrgency
from vacation_engine.schemas.absence import AbsenceEntry
from vacation_engine.schemas.policy import (
    EmployeeVacationAllowanceOverride,
    OrganizationVacationPolicy,
    VacationAdjustment,
)
from vacation_engine.services.carryover import (
    calculate_carryover_amount,
    classify_expiry_urgency,
    expire_carryover,
    get_expiration_report,
    run_annual_carryover,
)
from vacation_engine.services.records import EmployeeInfo, InMemoryVacationRecordService

COMPANY_ID = uuid.uuid4()
NOW = datetime(2025, 1, 1, 0, 5, tzinfo=UTC)


def _policy(**overrides: object) -> OrganizationVacationPolicy:
    data: dict[str, object] = {
        "default_annual_days": "25",
        "allow_carryover": True,
        "max_carryover_days": "5",
        "carryover_expiry_months": 3,
    }
    data.update(overrides)
    return OrganizationVacationPolicy.model_validate(data)


def _employee(svc: InMemoryVacationRecordService, first_name: str) -> EmployeeInfo:
    employee = EmployeeInfo(
        id=uuid.uuid4(),
        company_id=COMPANY_ID,
        first_name=first_name,
        last_name="Tester",
        email=f"{first_name.lower()}@example.com",
    )
    svc.seed_employee(employee)
    return employee


def _approved(employee: EmployeeInfo, start: date, end: date) -> AbsenceEntry:
    return AbsenceEntry(employee_id=employee.id, start_date=start, end_date=end, status=AbsenceStatus.APPROVED)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def test_carryover_amount_uncapped() -> None:
    assert calculate_carryover_amount(Decimal(8), None) == (Decimal(8), False)


def test_carryover_amount_capped() -> None:
    assert calculate_carryover_amount(Decimal(8), Decimal(5)) == (Decimal(5), True)


def test_carryover_amount_below_cap() -> None:
    assert calculate_carryover_amount(Decimal(3), Decimal(5)) == (Decimal(3), False)


def test_carryover_amount_negative_remaining_carries_nothing() -> None:
    assert calculate_carryover_amount(Decimal(-2), Decimal(5)) == (Decimal(0), False)


@pytest.mark.parametrize(
    ("days", "urgency"),
    [
        (0, ExpiryUrgency.CRITICAL),
        (7, ExpiryUrgency.CRITICAL),
        (8, ExpiryUrgency.WARNING),
        (30, ExpiryUrgency.WARNING),
        (31, ExpiryUrgency.INFO),
    ],
)
def test_expiry_urgency(days: int, urgency: ExpiryUrgency) -> None:
    assert classify_expiry_urgency(days) == urgency


# ---------------------------------------------------------------------------
# Year-end carryover
# ---------------------------------------------------------------------------


async def test_annual_carryover_caps_and_writes_override() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy())
    svc.seed_policy(COMPANY_ID, 2025, _policy(carryover_expiry_months=6))
    heavy_user = _employee(svc, "Heavy")
    light_user = _employee(svc, "Light")
    # Heavy: 25 - 22 = 3 left; Light: 25 - 5 = 20 left, capped at 5.
    svc.seed_absence(_approved(heavy_user, date(2024, 7, 1), date(2024, 7, 30)))
    svc.seed_absence(_approved(light_user, date(2024, 6, 10), date(2024, 6, 14)))

    summary = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)

    assert summary.from_year == 2024
    assert summary.to_year == 2025
    assert summary.processed_at == NOW
    assert summary.employees_processed == 2
    assert summary.errors == []
    by_id = {r.employee_id: r for r in summary.results}

    assert by_id[heavy_user.id].previous_year_remaining == Decimal(3)
    assert by_id[heavy_user.id].carryover_applied == Decimal(3)
    assert by_id[heavy_user.id].carryover_capped is False

    assert by_id[light_user.id].previous_year_remaining == Decimal(20)
    assert by_id[light_user.id].carryover_applied == Decimal(5)
    assert by_id[light_user.id].carryover_capped is True
    assert by_id[light_user.id].expiry_date == date(2025, 6, 30)

    assert summary.total_days_carried_over == Decimal(8)

    override = await svc.get_override(light_user.id, 2025)
    assert override is not None
    assert override.custom_carryover_days == Decimal(5)


async def test_annual_carryover_keeps_existing_override_fields() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy(max_carryover_days=None))
    employee = _employee(svc, "Keeper")
    svc.seed_override(employee.id, 2025, EmployeeVacationAllowanceOverride(custom_annual_days=Decimal(28)))

    summary = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)

    assert summary.results[0].carryover_applied == Decimal(25)
    assert summary.results[0].expiry_date is None  # no 2025 policy configured
    override = await svc.get_override(employee.id, 2025)
    assert override == EmployeeVacationAllowanceOverride(
        custom_annual_days=Decimal(28), custom_carryover_days=Decimal(25)
    )


async def test_annual_carryover_counts_adjustments_and_ignores_pending() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy(max_carryover_days=None))
    employee = _employee(svc, "Adjusted")
    await svc.add_adjustment(
        VacationAdjustment(
            employee_id=employee.id,
            year=2024,
            days=Decimal(-20),
            reason="Payout correction",
            adjusted_by=uuid.uuid4(),
            created_at=NOW,
        )
    )
    svc.seed_absence(
        AbsenceEntry(
            employee_id=employee.id,
            start_date=date(2024, 12, 2),
            end_date=date(2024, 12, 3),
            status=AbsenceStatus.PENDING,
        )
    )

    summary = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)
    assert summary.results[0].previous_year_remaining == Decimal(5)


async def test_annual_carryover_zero_remaining_writes_nothing() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy(default_annual_days="5"))
    employee = _employee(svc, "Spent")
    svc.seed_absence(_approved(employee, date(2024, 6, 10), date(2024, 6, 17)))

    summary = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)

    assert summary.results[0].previous_year_remaining == Decimal(0)
    assert summary.results[0].carryover_applied == Decimal(0)
    assert await svc.get_override(employee.id, 2025) is None


async def test_annual_carryover_rerun_replaces_stale_override() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy(default_annual_days="5"))
    employee = _employee(svc, "Rerun")

    first = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)
    assert first.results[0].carryover_applied == Decimal(5)

    svc.seed_absence(_approved(employee, date(2024, 12, 23), date(2024, 12, 27)))
    second = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)

    assert second.results[0].carryover_applied == Decimal(0)
    override = await svc.get_override(employee.id, 2025)
    assert override is not None
    assert override.custom_carryover_days == Decimal(0)


async def test_annual_carryover_disallowed_returns_empty_summary() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2024, _policy(allow_carryover=False))
    _employee(svc, "Nobody")

    summary = await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)
    assert summary.employees_processed == 0
    assert summary.results == []
    assert summary.total_days_carried_over == Decimal(0)


async def test_annual_carryover_without_policy_raises() -> None:
    svc = InMemoryVacationRecordService()
    with pytest.raises(NotFoundError):
        await run_annual_carryover(svc, COMPANY_ID, 2024, now=NOW)


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


async def test_expire_carryover_after_expiry_date() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2025, _policy())
    carrier = _employee(svc, "Carrier")
    plain = _employee(svc, "Plain")
    svc.seed_override(carrier.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(4)))
    svc.seed_override(plain.id, 2025, EmployeeVacationAllowanceOverride(custom_annual_days=Decimal(30)))

    result = await expire_carryover(svc, COMPANY_ID, date(2025, 4, 1))

    assert result.employees_affected == 1
    assert result.days_expired == Decimal(4)
    assert result.details[0].employee_id == carrier.id
    override = await svc.get_override(carrier.id, 2025)
    assert override is not None
    assert override.custom_carryover_days == Decimal(0)


async def test_expire_carryover_not_before_expiry_date() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2025, _policy())
    carrier = _employee(svc, "Carrier")
    svc.seed_override(carrier.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(4)))

    result = await expire_carryover(svc, COMPANY_ID, date(2025, 3, 31))

    assert result.employees_affected == 0
    override = await svc.get_override(carrier.id, 2025)
    assert override is not None
    assert override.custom_carryover_days == Decimal(4)


async def test_expire_carryover_without_expiry_months_is_noop() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2025, _policy(carryover_expiry_months=None))
    carrier = _employee(svc, "Carrier")
    svc.seed_override(carrier.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(4)))

    result = await expire_carryover(svc, COMPANY_ID, date(2025, 12, 31))
    assert result.employees_affected == 0


# ---------------------------------------------------------------------------
# Expiration report
# ---------------------------------------------------------------------------


async def test_expiration_report_lists_upcoming_expiries() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2025, _policy())
    soon = _employee(svc, "Soon")
    none = _employee(svc, "None")
    svc.seed_override(soon.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(3)))
    svc.seed_override(none.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(0)))

    report = await get_expiration_report(svc, COMPANY_ID, 2025, date(2025, 3, 26), days_ahead=90)

    assert report.total == 1
    notice = report.items[0]
    assert notice.employee_id == soon.id
    assert notice.carryover_days == Decimal(3)
    assert notice.expires_at == date(2025, 3, 31)
    assert notice.days_until_expiry == 5
    assert notice.urgency == ExpiryUrgency.CRITICAL


async def test_expiration_report_respects_window() -> None:
    svc = InMemoryVacationRecordService()
    svc.seed_policy(COMPANY_ID, 2025, _policy())
    employee = _employee(svc, "Later")
    svc.seed_override(employee.id, 2025, EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(3)))

    report = await get_expiration_report(svc, COMPANY_ID, 2025, date(2025, 1, 1), days_ahead=30)
    assert report.total == 0

    report = await get_expiration_report(svc, COMPANY_ID, 2025, date(2025, 1, 1), days_ahead=90)
    assert report.total == 1
    assert report.items[0].urgency == ExpiryUrgency.INFO
