"""SQLite-backed store for the weekly schedule, date overrides and config.

Every read goes to the database; nothing is cached in process, so several
server instances sharing one database file stay consistent.

Connection and query failures surface as DataUnavailable after tenacity
retries. Rows holding malformed times or dates are logged and skipped rather
than failing the whole read.
"""

import datetime as dt
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.officehours.errors import DataUnavailable, InvalidTimeFormat
from src.officehours.logging import get_logger
from src.officehours.models import (
    DateOverride,
    GlobalConfig,
    Weekday,
    WeeklyScheduleEntry,
)
from src.officehours.timeconv import format_utc_time, parse_time_of_day

logger = get_logger(__name__)

DEFAULT_ZOOM_LINK = "https://zoom.us/j/example"

_store_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(0.1),
    retry=retry_if_exception_type(DataUnavailable),
    reraise=True,
)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS weekly_schedule (
        day_of_week INTEGER PRIMARY KEY,
        enabled INTEGER NOT NULL DEFAULT 0,
        custom_time TEXT,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS office_hours_overrides (
        date TEXT PRIMARY KEY,
        time TEXT,
        is_available INTEGER NOT NULL DEFAULT 1,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS office_hours_config (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        default_zoom_link TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS calendar_additions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        user_ip TEXT,
        user_agent TEXT,
        created_at TEXT
    )
    """,
)


def _timestamp() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


class ScheduleStore:
    """Reads and writes office hours data in a SQLite database file."""

    def __init__(
        self,
        db_path: str,
        default_time: str = "15:00:00",
        default_zoom_link: str = DEFAULT_ZOOM_LINK,
    ) -> None:
        """Initialize ScheduleStore.

        Args:
            db_path: Path to the SQLite database file.
            default_time: UTC time for weekly rows stored without a time.
            default_zoom_link: Link seeded by init_db and returned when unset.
        """
        self.db_path = Path(db_path)
        self.default_time = parse_time_of_day(default_time)
        self.default_zoom_link = default_zoom_link

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self.db_path), timeout=5)
        except sqlite3.Error as e:
            logger.error("store_connect_failed", path=str(self.db_path), error=str(e))
            raise DataUnavailable(f"Cannot open database {self.db_path}: {e}") from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            logger.error("store_query_failed", path=str(self.db_path), error=str(e))
            raise DataUnavailable(f"Database query failed: {e}") from e
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create tables and seed Mon-Fri sessions plus the config row."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        now = _timestamp()
        with self._connect() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)
            conn.executemany(
                "INSERT OR IGNORE INTO weekly_schedule "
                "(day_of_week, enabled, custom_time, updated_at) VALUES (?, ?, ?, ?)",
                [
                    (
                        int(day),
                        int(day <= Weekday.FRIDAY),
                        format_utc_time(self.default_time),
                        now,
                    )
                    for day in Weekday
                ],
            )
            conn.execute(
                "INSERT OR IGNORE INTO office_hours_config "
                "(id, default_zoom_link, updated_at) VALUES (1, ?, ?)",
                (self.default_zoom_link, now),
            )
        logger.info("store_initialized", path=str(self.db_path))

    # ------------------------------------------------------------------
    # Weekly schedule
    # ------------------------------------------------------------------
    @_store_retry
    def get_weekly_schedule(self) -> dict[Weekday, WeeklyScheduleEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT day_of_week, enabled, custom_time FROM weekly_schedule "
                "ORDER BY day_of_week"
            ).fetchall()

        schedule: dict[Weekday, WeeklyScheduleEntry] = {}
        for day_of_week, enabled, custom_time in rows:
            try:
                weekday = Weekday(day_of_week)
                time = (
                    self.default_time
                    if custom_time is None
                    else parse_time_of_day(custom_time)
                )
            except (ValueError, InvalidTimeFormat) as e:
                logger.warning(
                    "row_skipped",
                    table="weekly_schedule",
                    day_of_week=day_of_week,
                    error=str(e),
                )
                continue
            schedule[weekday] = WeeklyScheduleEntry(
                weekday=weekday, enabled=bool(enabled), time=time
            )
        return schedule

    @_store_retry
    def save_weekly_schedule(self, entries: Mapping[Weekday, WeeklyScheduleEntry]) -> None:
        with self._connect() as conn:
            self._write_weekly(conn, entries, _timestamp())
        logger.info("weekly_schedule_saved", days=len(entries))

    def _write_weekly(
        self,
        conn: sqlite3.Connection,
        entries: Mapping[Weekday, WeeklyScheduleEntry],
        now: str,
    ) -> None:
        conn.executemany(
            "INSERT INTO weekly_schedule (day_of_week, enabled, custom_time, updated_at) "
            "VALUES (?, ?, ?, ?) "
            "ON CONFLICT(day_of_week) DO UPDATE SET enabled = excluded.enabled, "
            "custom_time = excluded.custom_time, updated_at = excluded.updated_at",
            [
                (int(e.weekday), int(e.enabled), format_utc_time(e.time), now)
                for e in entries.values()
            ],
        )

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------
    @_store_retry
    def get_overrides(self, start: dt.date, end: dt.date) -> dict[dt.date, DateOverride]:
        """Overrides dated between start and end, both inclusive."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT date, time, is_available FROM office_hours_overrides "
                "WHERE date >= ? AND date <= ? ORDER BY date",
                (start.isoformat(), end.isoformat()),
            ).fetchall()

        overrides: dict[dt.date, DateOverride] = {}
        for date_str, time_str, is_available in rows:
            try:
                day = dt.date.fromisoformat(date_str)
                time = None if time_str is None else parse_time_of_day(time_str)
            except (ValueError, InvalidTimeFormat) as e:
                logger.warning(
                    "row_skipped",
                    table="office_hours_overrides",
                    date=date_str,
                    error=str(e),
                )
                continue
            overrides[day] = DateOverride(
                date=day, is_available=bool(is_available), time=time
            )
        return overrides

    @_store_retry
    def upsert_override(self, override: DateOverride) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO office_hours_overrides (date, time, is_available, updated_at) "
                "VALUES (?, ?, ?, ?) "
                "ON CONFLICT(date) DO UPDATE SET time = excluded.time, "
                "is_available = excluded.is_available, updated_at = excluded.updated_at",
                (
                    override.date.isoformat(),
                    None if override.time is None else format_utc_time(override.time),
                    int(override.is_available),
                    _timestamp(),
                ),
            )
        logger.info(
            "override_upserted",
            date=override.date.isoformat(),
            is_available=override.is_available,
            time=None if override.time is None else format_utc_time(override.time),
        )

    @_store_retry
    def delete_override(self, day: dt.date) -> bool:
        """Remove the override for ``day``. Returns False if there was none."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM office_hours_overrides WHERE date = ?", (day.isoformat(),)
            )
            removed = cursor.rowcount > 0
        logger.info("override_deleted", date=day.isoformat(), removed=removed)
        return removed

    # ------------------------------------------------------------------
    # Global config
    # ------------------------------------------------------------------
    @_store_retry
    def get_default_zoom_link(self) -> str:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT default_zoom_link FROM office_hours_config WHERE id = 1"
            ).fetchone()
        if row is None or not row[0]:
            return self.default_zoom_link
        return row[0]

    def get_global_config(self) -> GlobalConfig:
        return GlobalConfig(default_zoom_link=self.get_default_zoom_link())

    @_store_retry
    def set_default_zoom_link(self, link: str) -> None:
        with self._connect() as conn:
            self._write_zoom_link(conn, link, _timestamp())
        logger.info("zoom_link_saved")

    def _write_zoom_link(self, conn: sqlite3.Connection, link: str, now: str) -> None:
        conn.execute(
            "INSERT INTO office_hours_config (id, default_zoom_link, updated_at) "
            "VALUES (1, ?, ?) "
            "ON CONFLICT(id) DO UPDATE SET default_zoom_link = excluded.default_zoom_link, "
            "updated_at = excluded.updated_at",
            (link, now),
        )

    @_store_retry
    def save_config(
        self, link: str, entries: Mapping[Weekday, WeeklyScheduleEntry]
    ) -> None:
        """Write the zoom link and weekly schedule in one transaction.

        Either both are stored or neither is.
        """
        now = _timestamp()
        with self._connect() as conn:
            self._write_zoom_link(conn, link, now)
            if entries:
                self._write_weekly(conn, entries, now)
        logger.info("config_saved", days=len(entries))

    # ------------------------------------------------------------------
    # Calendar additions
    # ------------------------------------------------------------------
    def record_calendar_addition(
        self, day: dt.date, user_ip: str = "unknown", user_agent: str = "unknown"
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO calendar_additions (date, user_ip, user_agent, created_at) "
                "VALUES (?, ?, ?, ?)",
                (day.isoformat(), user_ip, user_agent, _timestamp()),
            )
        logger.info("calendar_addition_recorded", date=day.isoformat())

    @_store_retry
    def get_calendar_stats(self, start: dt.date, end: dt.date) -> dict[dt.date, int]:
        """Count of calendar additions per session date, both bounds inclusive."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT date, COUNT(*) FROM calendar_additions "
                "WHERE date >= ? AND date <= ? GROUP BY date ORDER BY date",
                (start.isoformat(), end.isoformat()),
            ).fetchall()

        stats: dict[dt.date, int] = {}
        for date_str, count in rows:
            try:
                stats[dt.date.fromisoformat(date_str)] = count
            except (TypeError, ValueError) as e:
                logger.warning(
                    "row_skipped",
                    table="calendar_additions",
                    date=date_str,
                    error=str(e),
                )
        return stats
