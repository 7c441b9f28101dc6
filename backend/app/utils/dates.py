"""Timestamp helpers shared by the scoring and lifecycle services.

Naive datetimes are read as UTC so snapshots coming from different
sources can be compared safely.
"""

from datetime import datetime, timezone

SECONDS_PER_DAY = 86_400


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_days(start: datetime, end: datetime) -> float:
    """Fractional days from ``start`` to ``end``, never negative."""
    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return max(0.0, seconds / SECONDS_PER_DAY)
