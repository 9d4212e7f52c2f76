import datetime as dt
import sqlite3

import pytest

from src.officehours.errors import DataUnavailable
from src.officehours.models import DateOverride, Weekday, WeeklyScheduleEntry
from src.officehours.store import ScheduleStore

MONDAY = dt.date(2026, 10, 19)


def test_init_db_seeds_weekday_schedule(store) -> None:
    schedule = store.get_weekly_schedule()
    assert set(schedule) == set(Weekday)
    enabled = {day for day, entry in schedule.items() if entry.enabled}
    assert enabled == {
        Weekday.MONDAY,
        Weekday.TUESDAY,
        Weekday.WEDNESDAY,
        Weekday.THURSDAY,
        Weekday.FRIDAY,
    }
    assert all(entry.time == dt.time(15, 0) for entry in schedule.values())


def test_init_db_is_idempotent(store) -> None:
    store.save_weekly_schedule(
        {Weekday.MONDAY: WeeklyScheduleEntry(weekday=Weekday.MONDAY, enabled=False)}
    )
    store.init_db()
    assert store.get_weekly_schedule()[Weekday.MONDAY].enabled is False


def test_save_weekly_schedule_updates_time(store) -> None:
    store.save_weekly_schedule(
        {
            Weekday.SATURDAY: WeeklyScheduleEntry(
                weekday=Weekday.SATURDAY, enabled=True, time=dt.time(9, 30)
            )
        }
    )
    saturday = store.get_weekly_schedule()[Weekday.SATURDAY]
    assert (saturday.enabled, saturday.time) == (True, dt.time(9, 30))


def test_malformed_weekly_row_is_skipped(store) -> None:
    with sqlite3.connect(store.db_path) as conn:
        conn.execute("UPDATE weekly_schedule SET custom_time = '25:99' WHERE day_of_week = 2")
        conn.execute("UPDATE weekly_schedule SET custom_time = NULL WHERE day_of_week = 3")
        conn.execute("INSERT INTO weekly_schedule (day_of_week, enabled) VALUES (9, 1)")
    schedule = store.get_weekly_schedule()
    assert Weekday.TUESDAY not in schedule
    assert schedule[Weekday.WEDNESDAY].time == dt.time(15, 0)
    assert len(schedule) == 6


def test_override_upsert_and_delete(store) -> None:
    wednesday = MONDAY + dt.timedelta(days=2)
    store.upsert_override(DateOverride(date=wednesday, is_available=False))
    store.upsert_override(DateOverride(date=wednesday, time=dt.time(10, 0)))

    overrides = store.get_overrides(MONDAY, MONDAY + dt.timedelta(days=6))
    assert overrides == {
        wednesday: DateOverride(date=wednesday, is_available=True, time=dt.time(10, 0))
    }

    assert store.delete_override(wednesday) is True
    assert store.delete_override(wednesday) is False
    assert store.get_overrides(MONDAY, MONDAY + dt.timedelta(days=6)) == {}


def test_get_overrides_range_is_inclusive(store) -> None:
    for offset in (0, 5, 6):
        day = MONDAY + dt.timedelta(days=offset)
        store.upsert_override(DateOverride(date=day, is_available=False))
    overrides = store.get_overrides(MONDAY, MONDAY + dt.timedelta(days=5))
    assert sorted(overrides) == [MONDAY, MONDAY + dt.timedelta(days=5)]


def test_malformed_override_row_is_skipped(store) -> None:
    with sqlite3.connect(store.db_path) as conn:
        conn.execute(
            "INSERT INTO office_hours_overrides (date, time, is_available) "
            "VALUES ('2026-10-20', 'soon', 1)"
        )
    store.upsert_override(DateOverride(date=MONDAY, time=dt.time(8, 0)))
    overrides = store.get_overrides(MONDAY, MONDAY + dt.timedelta(days=2))
    assert list(overrides) == [MONDAY]


def test_zoom_link_round_trips_through_database(store, config) -> None:
    assert store.get_default_zoom_link() == config.default_zoom_link
    store.set_default_zoom_link("https://zoom.us/j/999")

    reopened = ScheduleStore(config.db_path)
    assert reopened.get_default_zoom_link() == "https://zoom.us/j/999"


def test_calendar_stats_count_per_date(store) -> None:
    store.record_calendar_addition(MONDAY, "1.2.3.4", "pytest")
    store.record_calendar_addition(MONDAY)
    store.record_calendar_addition(MONDAY + dt.timedelta(days=1))
    store.record_calendar_addition(MONDAY + dt.timedelta(days=40))
    stats = store.get_calendar_stats(MONDAY, MONDAY + dt.timedelta(days=30))
    assert stats == {MONDAY: 2, MONDAY + dt.timedelta(days=1): 1}


def test_uninitialised_database_is_data_unavailable(tmp_path) -> None:
    store = ScheduleStore(str(tmp_path / "empty.db"))
    with pytest.raises(DataUnavailable):
        store.get_weekly_schedule()


def test_unopenable_database_is_data_unavailable(tmp_path) -> None:
    store = ScheduleStore(str(tmp_path))
    with pytest.raises(DataUnavailable):
        store.get_overrides(MONDAY, MONDAY)


def test_global_config_wraps_zoom_link(store, config) -> None:
    assert store.get_global_config().default_zoom_link == config.default_zoom_link


def test_save_config_writes_link_and_schedule_together(store) -> None:
    store.save_config(
        "https://zoom.us/j/321",
        {Weekday.MONDAY: WeeklyScheduleEntry(weekday=Weekday.MONDAY, enabled=False)},
    )
    assert store.get_default_zoom_link() == "https://zoom.us/j/321"
    assert store.get_weekly_schedule()[Weekday.MONDAY].enabled is False


def test_malformed_calendar_addition_row_is_skipped(store) -> None:
    store.record_calendar_addition(MONDAY)
    with sqlite3.connect(store.db_path) as conn:
        conn.execute(
            "INSERT INTO calendar_additions (date, user_ip, user_agent) "
            "VALUES ('2026-10-2x', 'unknown', 'unknown')"
        )
    stats = store.get_calendar_stats(MONDAY, MONDAY + dt.timedelta(days=30))
    assert stats == {MONDAY: 1}
