import datetime as dt

from src.officehours.countdown import evaluate, remaining_until
from src.officehours.models import Countdown, ResolvedOccurrence

UTC = dt.timezone.utc
OCCURRENCE = ResolvedOccurrence(date=dt.date(2026, 10, 21), time=dt.time(15, 0))
START = dt.datetime(2026, 10, 21, 15, 0, tzinfo=UTC)


def test_countdown_before_start() -> None:
    now = START - dt.timedelta(days=2, hours=3, minutes=4, seconds=5)
    window = evaluate(OCCURRENCE, now)
    assert window.remaining == Countdown(days=2, hours=3, minutes=4, seconds=5)
    assert window.is_live is False


def test_live_half_an_hour_in() -> None:
    window = evaluate(OCCURRENCE, START + dt.timedelta(minutes=30))
    assert window.remaining is None
    assert window.is_live is True


def test_over_after_ninety_minutes() -> None:
    window = evaluate(OCCURRENCE, START + dt.timedelta(minutes=90))
    assert window.remaining is None
    assert window.is_live is False


def test_live_window_bounds_are_inclusive() -> None:
    assert evaluate(OCCURRENCE, START).is_live is True
    assert evaluate(OCCURRENCE, START + dt.timedelta(hours=1)).is_live is True
    assert evaluate(OCCURRENCE, START + dt.timedelta(hours=1, seconds=1)).is_live is False


def test_remaining_under_a_second_is_zero_not_none() -> None:
    remaining = remaining_until(START, START - dt.timedelta(milliseconds=500))
    assert remaining == Countdown(days=0, hours=0, minutes=0, seconds=0)
