from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from vacation_engine.schemas.policy import EffectivePolicy

if TYPE_CHECKING:
    from vacation_engine.schemas.policy import EmployeeVacationAllowanceOverride, OrganizationVacationPolicy


def resolve_effective_policy(
    policy: OrganizationVacationPolicy,
    override: EmployeeVacationAllowanceOverride | None = None,
) -> EffectivePolicy:
    """Merge the organization policy with an employee's override.

    Override fields that are set win; unset fields inherit the organization
    value. Carryover has no organization default: it is zero unless the
    override sets it.
    """
    annual_days = policy.default_annual_days
    carryover_days_raw = Decimal(0)

    if override is not None:
        if override.custom_annual_days is not None:
            annual_days = override.custom_annual_days
        if override.custom_carryover_days is not None:
            carryover_days_raw = override.custom_carryover_days

    return EffectivePolicy(
        annual_days=annual_days,
        carryover_days_raw=carryover_days_raw,
        allow_carryover=policy.allow_carryover,
        max_carryover_days=policy.max_carryover_days,
        carryover_expiry_months=policy.carryover_expiry_months,
    )
