import datetime as dt

import pytest

from src.officehours.auth import (
    SessionSigner,
    check_password,
    read_session_cookie,
    session_cookie,
)
from src.officehours.errors import AuthenticationError

NOW = dt.datetime(2026, 10, 19, 10, 0, tzinfo=dt.timezone.utc)


def test_issued_token_verifies() -> None:
    signer = SessionSigner("secret", max_age_hours=24)
    signer.verify(signer.issue(now=NOW), now=NOW + dt.timedelta(hours=23))


def test_expired_token_is_rejected() -> None:
    signer = SessionSigner("secret", max_age_hours=24)
    token = signer.issue(now=NOW)
    with pytest.raises(AuthenticationError):
        signer.verify(token, now=NOW + dt.timedelta(hours=25))


@pytest.mark.parametrize("token", [None, "", "garbage", "123.abc"])
def test_malformed_tokens_are_rejected(token) -> None:
    with pytest.raises(AuthenticationError):
        SessionSigner("secret").verify(token, now=NOW)


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = SessionSigner("other").issue(now=NOW)
    with pytest.raises(AuthenticationError):
        SessionSigner("secret").verify(token, now=NOW)


def test_check_password() -> None:
    check_password("hunter2", "hunter2")
    with pytest.raises(AuthenticationError):
        check_password("wrong", "hunter2")
    with pytest.raises(AuthenticationError):
        check_password("", "")


def test_cookie_round_trip() -> None:
    header = session_cookie("123.abc", 24, secure=True)
    assert header.startswith("admin_session=123.abc")
    assert "Max-Age=86400" in header
    assert "Secure" in header
    assert read_session_cookie("theme=dark; admin_session=123.abc") == "123.abc"
    assert read_session_cookie(None) is None
    assert read_session_cookie("theme=dark") is None
