from vacation_engine.models.enums import AbsenceStatus, AccrualType, DayPeriod, ExpiryUrgency

__all__ = [
    "AbsenceStatus",
    "AccrualType",
    "DayPeriod",
    "ExpiryUrgency",
]
