# agenda/utils/dates.py
"""Timestamp parsing and normalization helpers"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

from agenda.core.errors import ValidationError


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values and convert aware ones to UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None], field: str = "scheduled_at") -> datetime:
    """
    Parse an ISO-8601 instant into an aware UTC datetime.

    Naive inputs are taken as UTC. Past instants are accepted.
    Raises ValidationError for anything that does not parse.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Invalid date format", {field: ["A valid ISO-8601 timestamp is required"]})

    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Invalid date format", {field: [f"'{value}' is not a valid ISO-8601 timestamp"]})

    return ensure_utc(parsed)


def day_bounds(day: date, tz_name: str = "UTC") -> Tuple[datetime, datetime]:
    """Return the [start, end) UTC instants of a calendar day in the given timezone"""
    tz = ZoneInfo(tz_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
