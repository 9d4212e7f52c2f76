"""Next-occurrence resolution over a weekly schedule and date overrides.

Scans calendar days forward from the UTC day of ``now`` and yields at most one
session per day, so the output is chronological by construction.

Precedence for a given day:
  1. An override with is_available=False suppresses the day.
  2. An available override with a time yields a session at that time.
  3. An available override without a time yields nothing while
     OVERRIDE_REQUIRES_TIME is set (otherwise the weekly slot is used).
  4. Without an override, an enabled weekly slot yields a session, except on
     day 0 when the slot is already earlier than ``now``.

The day-0 cutoff applies to weekly slots only. An override for today whose
time has passed is still yielded.
"""

import datetime as dt
from collections.abc import Iterable, Iterator, Mapping
from itertools import islice
from typing import NamedTuple

from src.officehours.models import (
    DateOverride,
    ResolvedOccurrence,
    Weekday,
    WeeklyScheduleEntry,
)

HORIZON_DAYS = 30

# Available overrides must carry their own time to produce a session.
OVERRIDE_REQUIRES_TIME = True


class Page(NamedTuple):
    items: list[ResolvedOccurrence]
    total: int
    has_more: bool
    offset: int
    limit: int


def as_utc(now: dt.datetime) -> dt.datetime:
    """Normalise an instant to aware UTC. Naive values are taken as UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=dt.timezone.utc)
    return now.astimezone(dt.timezone.utc)


def iter_occurrences(
    now: dt.datetime,
    weekly_schedule: Mapping[Weekday, WeeklyScheduleEntry],
    overrides: Mapping[dt.date, DateOverride],
    horizon_days: int = HORIZON_DAYS,
    *,
    override_requires_time: bool = OVERRIDE_REQUIRES_TIME,
) -> Iterator[ResolvedOccurrence]:
    """Lazily yield sessions for ``horizon_days`` calendar days from today (UTC)."""
    now = as_utc(now)
    today = now.date()

    for offset in range(horizon_days):
        day = today + dt.timedelta(days=offset)
        entry = weekly_schedule.get(Weekday.from_date(day))
        override = overrides.get(day)

        if override is not None:
            if not override.is_available:
                continue
            if override.time is not None:
                yield ResolvedOccurrence(date=day, time=override.time, is_override=True)
            elif not override_requires_time and entry is not None and entry.enabled:
                yield ResolvedOccurrence(date=day, time=entry.time, is_override=True)
            continue

        if entry is None or not entry.enabled:
            continue
        if offset == 0 and entry.time < now.time():
            continue
        yield ResolvedOccurrence(date=day, time=entry.time, is_override=False)


def paginate(
    occurrences: Iterable[ResolvedOccurrence], offset: int = 0, limit: int | None = None
) -> Page:
    """Slice ``[offset, offset + limit)`` out of the full sequence.

    Args:
        occurrences: Resolved sequence, consumed entirely to count the total.
        offset: Index of the first item to return.
        limit: Maximum items to return. None returns everything after offset.

    Raises:
        ValueError: If offset or limit is negative.
    """
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    everything = list(occurrences)
    total = len(everything)
    stop = total if limit is None else offset + limit
    items = list(islice(everything, offset, stop))
    return Page(
        items=items,
        total=total,
        has_more=stop < total,
        offset=offset,
        limit=len(items) if limit is None else limit,
    )


def resolve_occurrences(
    now: dt.datetime,
    horizon_days: int,
    weekly_schedule: Mapping[Weekday, WeeklyScheduleEntry],
    overrides: Mapping[dt.date, DateOverride],
    offset: int = 0,
    limit: int | None = None,
) -> Page:
    return paginate(
        iter_occurrences(now, weekly_schedule, overrides, horizon_days),
        offset=offset,
        limit=limit,
    )


def next_occurrence(
    now: dt.datetime,
    weekly_schedule: Mapping[Weekday, WeeklyScheduleEntry],
    overrides: Mapping[dt.date, DateOverride],
    horizon_days: int = HORIZON_DAYS,
) -> ResolvedOccurrence | None:
    return next(iter_occurrences(now, weekly_schedule, overrides, horizon_days), None)
