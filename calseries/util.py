"""Utility constants and helpers for calseries.

The constants are the package defaults for new calendars and all-day events.
"""

import uuid
from datetime import datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calseries.errors import InvalidTimezoneError, ValidationError

# Defaults
DEFAULT_TIMEZONE = "America/New_York"
ALL_DAY_START = time(8, 0)
ALL_DAY_END = time(17, 0)


def resolve_zone(zone: tzinfo | str | None) -> tzinfo:
    """Turn an IANA timezone name (or a tzinfo) into a tzinfo.

    Raises:
        ValidationError: If zone is None
        InvalidTimezoneError: If zone is a string that is not a known IANA id
    """
    if zone is None:
        raise ValidationError("Timezone cannot be None.")
    if isinstance(zone, tzinfo):
        return zone
    if not isinstance(zone, str) or not zone.strip():
        raise InvalidTimezoneError(f"Invalid timezone: {zone!r}")
    try:
        return ZoneInfo(zone.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(
            f"Invalid timezone: {zone!r}\n"
            f"Use an IANA identifier such as 'America/New_York' or 'UTC'."
        ) from e


def require_aware(dt: datetime, label: str) -> datetime:
    """Reject naive datetimes, which cannot be compared by instant."""
    if not isinstance(dt, datetime):
        raise ValidationError(
            f"{label} must be a datetime, got {type(dt).__name__!r}: {dt!r}"
        )
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValidationError(
            f"{label} must be a timezone-aware datetime.\n"
            f"Got naive datetime: {dt!r}\n"
            f"Hint: datetime(..., tzinfo=ZoneInfo('America/New_York'))"
        )
    return dt


def instant_delta(earlier: datetime, later: datetime) -> timedelta:
    """Elapsed time between two aware datetimes, independent of their zones."""
    return later.astimezone(timezone.utc) - earlier.astimezone(timezone.utc)


def shift(dt: datetime, delta: timedelta) -> datetime:
    """Move an aware datetime by delta on the instant timeline, keeping its zone."""
    return (dt.astimezone(timezone.utc) + delta).astimezone(dt.tzinfo)


def new_series_id() -> str:
    return str(uuid.uuid4())
