"""Office hours scheduling: weekly schedule, date overrides and countdowns.

Resolves the next sessions from a recurring Monday-Sunday schedule plus
single-date overrides, and serves them over a small JSON API.
"""

from src.officehours.countdown import evaluate
from src.officehours.models import (
    DateOverride,
    ResolvedOccurrence,
    Weekday,
    WeeklyScheduleEntry,
)
from src.officehours.resolver import iter_occurrences, resolve_occurrences
from src.officehours.service import OfficeHoursService
from src.officehours.store import ScheduleStore
from src.officehours.timeconv import local_to_utc_time, utc_to_local_time

__all__ = [
    "DateOverride",
    "OfficeHoursService",
    "ResolvedOccurrence",
    "ScheduleStore",
    "Weekday",
    "WeeklyScheduleEntry",
    "evaluate",
    "iter_occurrences",
    "local_to_utc_time",
    "resolve_occurrences",
    "utc_to_local_time",
]
