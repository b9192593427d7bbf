"""Timestamps: UTC clock helpers and the last-modified advancement rule.

Invariants:
    - Every datetime leaving this module is timezone-aware UTC
    - advance_timestamp(previous, now) > previous, always
"""

from datetime import datetime, timedelta, timezone

_TICK = timedelta(microseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo), convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def advance_timestamp(previous: datetime | None, now: datetime) -> datetime:
    """Next last-modified value for a resource.

    Uses the wall clock when it moved forward, otherwise one microsecond past
    the previous value, so a stalled or skewed clock still orders updates.
    """
    now = ensure_utc(now)
    if previous is None:
        return now
    previous = ensure_utc(previous)
    if now > previous:
        return now
    return previous + _TICK
