import datetime as dt

import pytest

from src.officehours.models import (
    DateOverride,
    ResolvedOccurrence,
    UpcomingPage,
    Weekday,
)


@pytest.mark.parametrize(
    "day, expected",
    [
        (dt.date(2026, 10, 18), Weekday.SUNDAY),
        (dt.date(2026, 10, 19), Weekday.MONDAY),
        (dt.date(2026, 10, 23), Weekday.FRIDAY),
        (dt.date(2026, 10, 24), Weekday.SATURDAY),
        (dt.date(2026, 10, 25), Weekday.SUNDAY),
    ],
)
def test_from_date_maps_sunday_to_seven(day: dt.date, expected: Weekday) -> None:
    assert Weekday.from_date(day) is expected


def test_from_date_uses_monday_one() -> None:
    assert Weekday.from_date(dt.date(2026, 10, 19)) is Weekday.MONDAY
    assert Weekday.from_date(dt.date(2026, 10, 25)) is Weekday.SUNDAY
    assert int(Weekday.SUNDAY) == 7


def test_from_name_is_case_insensitive() -> None:
    assert Weekday.from_name(" Wednesday ") is Weekday.WEDNESDAY
    assert Weekday.WEDNESDAY.label == "wednesday"
    with pytest.raises(ValueError):
        Weekday.from_name("funday")


def test_occurrence_serializes_with_camel_case() -> None:
    occurrence = ResolvedOccurrence(
        date=dt.date(2026, 10, 19), time=dt.time(15, 0), is_override=True
    )
    assert occurrence.model_dump(mode="json", by_alias=True) == {
        "date": "2026-10-19",
        "time": "15:00:00",
        "isOverride": True,
    }
    assert occurrence.starts_at == dt.datetime(2026, 10, 19, 15, tzinfo=dt.timezone.utc)


def test_models_accept_camel_case_input() -> None:
    override = DateOverride.model_validate({"date": "2026-10-21", "isAvailable": False})
    assert override.is_available is False
    assert override.time is None

    page = UpcomingPage.model_validate(
        {"upcoming": [], "zoomLink": "z", "total": 0, "hasMore": False, "offset": 0, "limit": 10}
    )
    assert page.zoom_link == "z"
