"""Conversion between local wall-clock times and stored UTC times of day.

Times of day are stored without a timezone and always mean UTC. The offset
between a local zone and UTC depends on the calendar date (daylight saving),
so every conversion takes a reference date and resolves the offset for that
date through zoneinfo.

Unknown timezone identifiers fall back to UTC and log ``timezone_fallback``
unless ``strict=True`` is passed, in which case InvalidTimezone is raised.
"""

import datetime as dt
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.officehours.errors import InvalidTimeFormat, InvalidTimezone
from src.officehours.logging import get_logger

log = get_logger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time_of_day(value: str | dt.time) -> dt.time:
    """Parse "HH:MM" or "HH:MM:SS" into a naive time.

    Raises:
        InvalidTimeFormat: If the value is not a valid 24h time of day.
    """
    if isinstance(value, dt.time):
        return value.replace(tzinfo=None, microsecond=0)
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"Invalid time of day: {value!r}")
    hour, minute, second = match.group(1), match.group(2), match.group(3) or "0"
    try:
        return dt.time(int(hour), int(minute), int(second))
    except ValueError as e:
        raise InvalidTimeFormat(f"Invalid time of day: {value!r}") from e


def format_utc_time(value: dt.time) -> str:
    return value.strftime("%H:%M:%S")


def format_local_time(value: dt.time) -> str:
    return value.strftime("%H:%M")


def resolve_timezone(name: str | None, *, strict: bool = False) -> dt.tzinfo:
    """Resolve an IANA timezone identifier.

    Args:
        name: IANA identifier such as "Europe/Paris". Empty or "UTC" is UTC.
        strict: Raise instead of falling back to UTC.

    Raises:
        InvalidTimezone: If strict and the identifier is unknown.
    """
    if not name or name.strip().upper() in {"UTC", "Z", "GMT"}:
        return dt.timezone.utc
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        if strict:
            raise InvalidTimezone(f"Unknown timezone {name!r}") from e
        log.warning("timezone_fallback", timezone=name, fallback="UTC", error=str(e))
        return dt.timezone.utc


def local_to_utc_time(
    local_time: str | dt.time,
    reference_date: dt.date,
    timezone: str | None,
    *,
    strict: bool = False,
) -> str:
    """Convert a local "HH:MM" on reference_date to a UTC "HH:MM:SS".

    Local times inside a spring-forward gap resolve with the offset in force
    before the transition.
    """
    tz = resolve_timezone(timezone, strict=strict)
    local = dt.datetime.combine(reference_date, parse_time_of_day(local_time), tzinfo=tz)
    return format_utc_time(local.astimezone(dt.timezone.utc).time())


def utc_to_local_time(
    utc_time: str | dt.time,
    reference_date: dt.date,
    timezone: str | None,
    *,
    strict: bool = False,
) -> str:
    """Convert a UTC time of day on reference_date to a local "HH:MM"."""
    tz = resolve_timezone(timezone, strict=strict)
    utc = dt.datetime.combine(
        reference_date, parse_time_of_day(utc_time), tzinfo=dt.timezone.utc
    )
    return format_local_time(utc.astimezone(tz).time())


def to_local_datetime(instant: dt.datetime, timezone: str | None) -> dt.datetime:
    """Express an instant in a local zone. Naive instants are taken as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=dt.timezone.utc)
    return instant.astimezone(resolve_timezone(timezone))
