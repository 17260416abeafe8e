"""
Timezone utilities for CoachConnect.

All persisted timestamps are UTC. SQLite hands back naive datetimes, so every
comparison goes through ensure_utc first.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso_date(value: str) -> date:
    """Parse the date part of an ISO-8601 date or datetime string."""
    return date.fromisoformat(value[:10])
