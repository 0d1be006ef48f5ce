from __future__ import annotations

import enum


class AccrualType(enum.StrEnum):
    """How an organization's annual entitlement is granted over the year."""

    ANNUAL = "annual"
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"


class DayPeriod(enum.StrEnum):
    """Which part of a day an absence boundary covers."""

    FULL_DAY = "full_day"
    AM = "am"
    PM = "pm"


class AbsenceStatus(enum.StrEnum):
    """State machine for absence requests.

    Only PENDING has outgoing transitions; every other state is terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: AbsenceStatus) -> bool:
        """Return True if moving from this status to ``target`` is allowed."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[AbsenceStatus, frozenset[AbsenceStatus]] = {
    AbsenceStatus.PENDING: frozenset({AbsenceStatus.APPROVED, AbsenceStatus.REJECTED, AbsenceStatus.CANCELLED}),
    AbsenceStatus.APPROVED: frozenset(),
    AbsenceStatus.REJECTED: frozenset(),
    AbsenceStatus.CANCELLED: frozenset(),
}


class ExpiryUrgency(enum.StrEnum):
    """How soon a carryover balance expires."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
