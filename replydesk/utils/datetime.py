from __future__ import annotations
from datetime import datetime, timedelta, UTC
from typing import Optional

__all__ = ["utc_now", "ensure_aware_utc", "to_naive_utc", "advance_past", "days_ago"]

def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(UTC)

def ensure_aware_utc(dt: datetime | None) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware in UTC (assumes naive input already in UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)

def to_naive_utc(dt: datetime | None) -> Optional[datetime]:
    """Convert aware datetime to naive UTC for storage; pass through naive assumed UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)

def advance_past(previous: datetime | None) -> datetime:
    """Current UTC time, nudged forward so it is strictly later than ``previous``."""
    now = utc_now()
    previous = ensure_aware_utc(previous)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now

def days_ago(days: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)
