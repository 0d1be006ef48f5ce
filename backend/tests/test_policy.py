"""Tests for resolving the effective policy from organization defaults and overrides."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from vacation_engine.models.enums import AccrualType
from vacation_engine.schemas.policy import EmployeeVacationAllowanceOverride, OrganizationVacationPolicy
from vacation_engine.services.policy import resolve_effective_policy


def _policy(**overrides: object) -> OrganizationVacationPolicy:
    data: dict[str, object] = {
        "default_annual_days": "30",
        "allow_carryover": True,
        "max_carryover_days": "10",
        "carryover_expiry_months": 3,
    }
    data.update(overrides)
    return OrganizationVacationPolicy.model_validate(data)


def test_no_override_inherits_organization_defaults() -> None:
    effective = resolve_effective_policy(_policy())
    assert effective.annual_days == Decimal(30)
    assert effective.carryover_days_raw == Decimal(0)
    assert effective.allow_carryover is True
    assert effective.max_carryover_days == Decimal(10)
    assert effective.carryover_expiry_months == 3


def test_custom_annual_days_wins() -> None:
    override = EmployeeVacationAllowanceOverride(custom_annual_days=Decimal(35))
    assert resolve_effective_policy(_policy(), override).annual_days == Decimal(35)


def test_empty_override_inherits_everything() -> None:
    effective = resolve_effective_policy(_policy(), EmployeeVacationAllowanceOverride())
    assert effective.annual_days == Decimal(30)
    assert effective.carryover_days_raw == Decimal(0)


def test_custom_carryover_days_used_as_raw_carryover() -> None:
    override = EmployeeVacationAllowanceOverride(custom_carryover_days=Decimal(5))
    effective = resolve_effective_policy(_policy(), override)
    assert effective.carryover_days_raw == Decimal(5)
    assert effective.annual_days == Decimal(30)


def test_zero_custom_annual_days_is_not_treated_as_missing() -> None:
    override = EmployeeVacationAllowanceOverride(custom_annual_days=Decimal(0))
    assert resolve_effective_policy(_policy(), override).annual_days == Decimal(0)


def test_policy_parses_decimal_strings() -> None:
    policy = _policy(default_annual_days="27.5", max_carryover_days="2.5")
    assert policy.default_annual_days == Decimal("27.5")
    assert policy.max_carryover_days == Decimal("2.5")
    assert policy.accrual_type == AccrualType.ANNUAL
    assert policy.accrual_start_month == 1


def test_policy_rejects_out_of_range_expiry_month() -> None:
    with pytest.raises(ValidationError):
        _policy(carryover_expiry_months=13)


def test_policy_is_immutable() -> None:
    policy = _policy()
    with pytest.raises(ValidationError):
        policy.default_annual_days = Decimal(1)  # type: ignore[misc]
