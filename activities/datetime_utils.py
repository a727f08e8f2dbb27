# activities/datetime_utils.py
"""
Centralized datetime handling for activities.

All "now" comparisons go through now() so tests and services agree on a
single clock (timezone-aware, USE_TZ=True).
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional
from django.utils import timezone


def now() -> datetime:
    """Current aware datetime; the single source of truth for "now"."""
    return timezone.now()


def is_activity_upcoming(activity, at: Optional[datetime] = None) -> bool:
    """True while the activity hasn't started yet."""
    if not activity.start_date:
        return False
    return (at or now()) < activity.start_date


def format_for_api(dt: Optional[datetime]) -> Optional[str]:
    """
    Format datetime for API responses (ISO 8601).

    Returns None if input is None.
    """
    if dt is None:
        return None
    return dt.isoformat()


def parse_iso(iso_string: Optional[str]) -> Optional[datetime]:
    """
    Parse ISO 8601 datetime string.

    Returns None if parsing fails. Naive values are taken as UTC.
    """
    if not iso_string:
        return None
    try:
        parsed = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def hours_before(start: datetime, hours: float) -> datetime:
    return start - timedelta(hours=hours)
