import datetime as dt

import pytest

from src.officehours.errors import InvalidTimeFormat, InvalidTimezone
from src.officehours.timeconv import (
    local_to_utc_time,
    parse_time_of_day,
    resolve_timezone,
    to_local_datetime,
    utc_to_local_time,
)

SUMMER = dt.date(2026, 7, 1)
WINTER = dt.date(2026, 12, 1)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("15:00", dt.time(15, 0)),
        ("15:00:00", dt.time(15, 0)),
        ("9:05", dt.time(9, 5)),
        (" 23:59:59 ", dt.time(23, 59, 59)),
    ],
)
def test_parse_time_of_day(value: str, expected: dt.time) -> None:
    assert parse_time_of_day(value) == expected


@pytest.mark.parametrize("value", ["", "15", "25:00", "12:60", "noon", "12:00:00:00", None])
def test_parse_time_of_day_rejects_malformed(value) -> None:
    with pytest.raises(InvalidTimeFormat):
        parse_time_of_day(value)


def test_local_to_utc_follows_daylight_saving() -> None:
    assert local_to_utc_time("17:00", SUMMER, "Europe/Paris") == "15:00:00"
    assert local_to_utc_time("16:00", WINTER, "Europe/Paris") == "15:00:00"
    assert local_to_utc_time("11:00", SUMMER, "America/New_York") == "15:00:00"
    assert local_to_utc_time("10:00", WINTER, "America/New_York") == "15:00:00"


def test_utc_to_local_follows_daylight_saving() -> None:
    assert utc_to_local_time("15:00:00", SUMMER, "Europe/Paris") == "17:00"
    assert utc_to_local_time("15:00:00", WINTER, "Europe/Paris") == "16:00"
    assert utc_to_local_time("15:00:00", SUMMER, "Asia/Kolkata") == "20:30"


def test_conversion_wraps_past_midnight() -> None:
    assert utc_to_local_time("02:00:00", WINTER, "America/Los_Angeles") == "18:00"
    assert local_to_utc_time("18:00", WINTER, "America/Los_Angeles") == "02:00:00"


@pytest.mark.parametrize(
    "tz", ["UTC", "Europe/Paris", "America/New_York", "Asia/Kolkata", "Australia/Sydney", "Pacific/Kiritimati"]
)
@pytest.mark.parametrize("utc", ["00:00:00", "06:30:00", "15:00:00", "23:45:00"])
def test_round_trip_on_a_day_without_transition(tz: str, utc: str) -> None:
    day = dt.date(2026, 6, 15)
    assert local_to_utc_time(utc_to_local_time(utc, day, tz), day, tz) == utc


def test_unknown_timezone_falls_back_to_utc() -> None:
    assert local_to_utc_time("09:30", SUMMER, "Mars/Olympus_Mons") == "09:30:00"
    assert utc_to_local_time("09:30:00", SUMMER, "Mars/Olympus_Mons") == "09:30"


def test_unknown_timezone_raises_when_strict() -> None:
    with pytest.raises(InvalidTimezone):
        resolve_timezone("Mars/Olympus_Mons", strict=True)
    with pytest.raises(InvalidTimezone):
        local_to_utc_time("09:30", SUMMER, "not a zone", strict=True)


def test_empty_timezone_is_utc() -> None:
    assert resolve_timezone(None) is dt.timezone.utc
    assert resolve_timezone("utc") is dt.timezone.utc


def test_to_local_datetime_treats_naive_as_utc() -> None:
    local = to_local_datetime(dt.datetime(2026, 7, 1, 15, 0), "Europe/Paris")
    assert (local.hour, local.minute) == (17, 0)
