"""Countdown and live-window evaluation for a resolved session."""

import datetime as dt

from src.officehours.models import Countdown, ResolvedOccurrence, SessionWindow
from src.officehours.resolver import as_utc

SESSION_LENGTH = dt.timedelta(hours=1)


def remaining_until(start: dt.datetime, now: dt.datetime) -> Countdown | None:
    """Break the time left before ``start`` into days/hours/minutes/seconds.

    Returns None once ``now`` has reached ``start``.
    """
    delta = as_utc(start) - as_utc(now)
    if delta <= dt.timedelta(0):
        return None
    left = int(delta.total_seconds())
    days, rest = divmod(left, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(days=days, hours=hours, minutes=minutes, seconds=seconds)


def evaluate(occurrence: ResolvedOccurrence, now: dt.datetime) -> SessionWindow:
    """Countdown and live flag for ``occurrence`` as seen at ``now``."""
    start = occurrence.starts_at
    now = as_utc(now)
    return SessionWindow(
        remaining=remaining_until(start, now),
        is_live=start <= now <= start + SESSION_LENGTH,
    )
