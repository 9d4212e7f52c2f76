"""Office hours service: store reads combined with occurrence resolution.

Presentation layers (HTTP handler, CLI) talk to OfficeHoursService only.
Admin-facing methods take and return local times in the admin's timezone and
convert at this boundary; everything below it is UTC.
"""

import datetime as dt

from src.officehours.config import OfficeHoursConfig
from src.officehours.countdown import evaluate
from src.officehours.errors import InvalidTimeFormat
from src.officehours.logging import get_logger
from src.officehours.models import (
    AdminConfig,
    AdminDay,
    DateOverride,
    NextSession,
    UpcomingPage,
    Weekday,
    WeeklyScheduleEntry,
)
from src.officehours.resolver import as_utc, iter_occurrences, paginate
from src.officehours.store import ScheduleStore
from src.officehours.timeconv import (
    local_to_utc_time,
    parse_time_of_day,
    resolve_timezone,
    utc_to_local_time,
)

log = get_logger(__name__)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class OfficeHoursService:
    def __init__(self, store: ScheduleStore, config: OfficeHoursConfig) -> None:
        self.store = store
        self.config = config

    def _window(self, now: dt.datetime, horizon_days: int):
        today = now.date()
        end = today + dt.timedelta(days=horizon_days - 1)
        weekly = self.store.get_weekly_schedule()
        overrides = self.store.get_overrides(today, end)
        return iter_occurrences(now, weekly, overrides, horizon_days)

    def upcoming(
        self, now: dt.datetime | None = None, offset: int = 0, limit: int = 10
    ) -> UpcomingPage:
        """Page of upcoming sessions within the configured horizon.

        Raises:
            DataUnavailable: If the store cannot be read.
            ValueError: If offset or limit is negative.
        """
        now = as_utc(now or _utc_now())
        page = paginate(
            self._window(now, self.config.horizon_days), offset=offset, limit=limit
        )
        log.debug("upcoming_resolved", total=page.total, offset=offset, limit=limit)
        return UpcomingPage(
            upcoming=page.items,
            zoom_link=self.store.get_global_config().default_zoom_link,
            total=page.total,
            has_more=page.has_more,
            offset=page.offset,
            limit=page.limit,
        )

    def next_session(self, now: dt.datetime | None = None) -> NextSession | None:
        """First session in the next-session horizon with its countdown, if any."""
        now = as_utc(now or _utc_now())
        occurrence = next(self._window(now, self.config.next_horizon_days), None)
        if occurrence is None:
            return None
        window = evaluate(occurrence, now)
        return NextSession(
            occurrence=occurrence,
            zoom_link=self.store.get_global_config().default_zoom_link,
            remaining=window.remaining,
            is_live=window.is_live,
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    def admin_config(self, timezone: str, today: dt.date | None = None) -> AdminConfig:
        """Weekly schedule and zoom link with times shown in ``timezone``."""
        resolve_timezone(timezone, strict=True)
        today = today or _utc_now().date()
        weekly = self.store.get_weekly_schedule()
        return AdminConfig(
            default_zoom_link=self.store.get_global_config().default_zoom_link,
            timezone=timezone,
            weekly_schedule={
                entry.weekday.label: AdminDay(
                    enabled=entry.enabled,
                    time=utc_to_local_time(entry.time, today, timezone),
                )
                for entry in weekly.values()
            },
        )

    def save_admin_config(self, payload: AdminConfig, today: dt.date | None = None) -> None:
        """Persist zoom link and weekly schedule edited in ``payload.timezone``.

        Days missing from the payload are left untouched. A day without a time
        is stored at the default UTC time.

        Raises:
            InvalidTimezone: If the payload timezone is unknown.
            InvalidTimeFormat: If a day's time is malformed.
            ValueError: If a weekday name is unknown or the zoom link is empty.
        """
        resolve_timezone(payload.timezone, strict=True)
        if not payload.default_zoom_link.strip():
            raise ValueError("defaultZoomLink must not be empty")
        today = today or _utc_now().date()

        entries: dict[Weekday, WeeklyScheduleEntry] = {}
        for name, day in payload.weekly_schedule.items():
            weekday = Weekday.from_name(name)
            time = (
                parse_time_of_day(local_to_utc_time(day.time, today, payload.timezone))
                if day.time
                else self.store.default_time
            )
            entries[weekday] = WeeklyScheduleEntry(
                weekday=weekday, enabled=day.enabled, time=time
            )

        self.store.save_config(payload.default_zoom_link.strip(), entries)
        log.info("admin_config_saved", timezone=payload.timezone, days=len(entries))

    def list_overrides(
        self, start: dt.date, end: dt.date, timezone: str
    ) -> list[dict]:
        """Overrides in [start, end] with local times and calendar-add counts."""
        resolve_timezone(timezone, strict=True)
        overrides = self.store.get_overrides(start, end)
        stats = self.store.get_calendar_stats(start, end)
        return [
            {
                "date": day.isoformat(),
                "isAvailable": override.is_available,
                "time": (
                    None
                    if override.time is None
                    else utc_to_local_time(override.time, day, timezone)
                ),
                "calendarAdditions": stats.get(day, 0),
            }
            for day, override in overrides.items()
        ]

    def set_override(
        self,
        day: dt.date,
        is_available: bool,
        local_time: str | None,
        timezone: str,
    ) -> DateOverride:
        """Upsert the override for ``day``; local_time is converted on that date.

        Raises:
            InvalidTimezone: If the timezone is unknown.
            InvalidTimeFormat: If local_time is malformed.
        """
        resolve_timezone(timezone, strict=True)
        time = None
        if local_time:
            try:
                time = parse_time_of_day(local_to_utc_time(local_time, day, timezone))
            except InvalidTimeFormat:
                log.warning("override_rejected", date=day.isoformat(), time=local_time)
                raise
        override = DateOverride(date=day, is_available=is_available, time=time)
        self.store.upsert_override(override)
        return override

    def remove_override(self, day: dt.date) -> bool:
        return self.store.delete_override(day)

    def track_calendar_addition(
        self, day: dt.date, user_ip: str = "unknown", user_agent: str = "unknown"
    ) -> None:
        self.store.record_calendar_addition(day, user_ip, user_agent)

    def calendar_stats(self, start: dt.date, end: dt.date) -> dict[dt.date, int]:
        return self.store.get_calendar_stats(start, end)
