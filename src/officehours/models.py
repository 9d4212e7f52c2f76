"""Pydantic models for office hours data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Serialized field names are camelCase to match the JSON API; Python attributes
stay snake_case. Times of day are naive and always mean UTC.
"""

import datetime as dt
from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_UTC_TIME = dt.time(15, 0)


class Weekday(IntEnum):
    """Day of week numbered Monday=1 .. Sunday=7."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def from_date(cls, day: dt.date) -> "Weekday":
        return cls(day.isoweekday())

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown weekday {name!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower()


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WeeklyScheduleEntry(_ApiModel):
    """Recurring session slot for one weekday."""

    weekday: Weekday
    enabled: bool = False
    time: dt.time = DEFAULT_UTC_TIME


class DateOverride(_ApiModel):
    """Exception to the weekly schedule for exactly one calendar date.

    is_available=False suppresses the date. is_available=True with a time
    replaces the weekly slot for that date only.
    """

    date: dt.date
    is_available: bool = True
    time: dt.time | None = None


class GlobalConfig(_ApiModel):
    default_zoom_link: str


class ResolvedOccurrence(_ApiModel):
    """A concrete session on a date at a UTC time."""

    date: dt.date
    time: dt.time
    is_override: bool = False

    @property
    def starts_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time, tzinfo=dt.timezone.utc)


class Countdown(_ApiModel):
    days: int
    hours: int
    minutes: int
    seconds: int


class SessionWindow(_ApiModel):
    remaining: Countdown | None = None
    is_live: bool = False


class UpcomingPage(_ApiModel):
    """One page of the resolved occurrence sequence."""

    upcoming: list[ResolvedOccurrence] = Field(default_factory=list)
    zoom_link: str
    total: int
    has_more: bool
    offset: int
    limit: int


class NextSession(_ApiModel):
    occurrence: ResolvedOccurrence
    zoom_link: str
    remaining: Countdown | None = None
    is_live: bool = False


class AdminDay(_ApiModel):
    enabled: bool = False
    time: str | None = None  # local "HH:MM" in the admin's timezone


class AdminConfig(_ApiModel):
    """Weekly schedule and zoom link as edited in the admin dashboard."""

    default_zoom_link: str
    timezone: str = "UTC"
    weekly_schedule: dict[str, AdminDay] = Field(default_factory=dict)


class OverrideRequest(_ApiModel):
    is_available: bool = True
    time: str | None = None  # local "HH:MM"
