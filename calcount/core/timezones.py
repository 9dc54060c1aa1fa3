"""
Day-boundary helpers.

All timestamps are stored as naive UTC. A "day" is always a calendar date
interpreted in an explicit IANA timezone, never the server's local time.
"""
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple

import pytz


def resolve_timezone(name: Optional[str], default: str = "UTC") -> tzinfo:
    """
    Resolve an IANA name to a pytz timezone (default when name is empty).
    Unknown names raise ValueError.
    """
    zone_name = (name or "").strip() or default
    try:
        return pytz.timezone(zone_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {zone_name}")


def _localize(moment: datetime, tz: tzinfo) -> datetime:
    if hasattr(tz, "localize"):
        return tz.localize(moment)
    return moment.replace(tzinfo=tz)


def to_storage(moment: datetime, tz: tzinfo) -> datetime:
    """
    Convert a client-supplied moment to the stored form: naive UTC,
    truncated to milliseconds. Naive input is read as wall-clock time in tz.
    """
    if moment.tzinfo is None:
        moment = _localize(moment, tz)
    utc_moment = moment.astimezone(pytz.utc).replace(tzinfo=None)
    return utc_moment.replace(microsecond=(utc_moment.microsecond // 1000) * 1000)


def local_day(stored: datetime, tz: tzinfo) -> date:
    """Calendar day a stored (naive UTC) timestamp falls on in tz."""
    return pytz.utc.localize(stored).astimezone(tz).date()


def day_window(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """
    [local midnight, next local midnight - 1ms] of `day` in tz, as naive UTC.
    Computed from the next midnight, so DST days are 23h or 25h long.
    """
    start = _localize(datetime.combine(day, time.min), tz)
    next_start = _localize(datetime.combine(day + timedelta(days=1), time.min), tz)
    end = next_start - timedelta(milliseconds=1)
    return (
        start.astimezone(pytz.utc).replace(tzinfo=None),
        end.astimezone(pytz.utc).replace(tzinfo=None),
    )


def day_key(day: date) -> datetime:
    """Key of a daily summary row: the calendar day at 00:00."""
    return datetime.combine(day, time.min)
