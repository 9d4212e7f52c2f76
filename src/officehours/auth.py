"""Admin session cookies signed with HMAC.

A session token is ``<issued_unix_seconds>.<hex hmac-sha256>``. It carries no
user data; holding a valid, unexpired token is what grants admin access.
"""

import datetime as dt
import hashlib
import hmac
from http.cookies import CookieError, SimpleCookie

from src.officehours.errors import AuthenticationError
from src.officehours.logging import get_logger

logger = get_logger(__name__)

COOKIE_NAME = "admin_session"


class SessionSigner:
    def __init__(self, secret: str, max_age_hours: int = 24) -> None:
        self.secret = secret.encode("utf-8")
        self.max_age = dt.timedelta(hours=max_age_hours)

    def _sign(self, issued: str) -> str:
        return hmac.new(self.secret, issued.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self, now: dt.datetime | None = None) -> str:
        now = now or dt.datetime.now(dt.timezone.utc)
        issued = str(int(now.timestamp()))
        return f"{issued}.{self._sign(issued)}"

    def verify(self, token: str | None, now: dt.datetime | None = None) -> None:
        """Check a session token.

        Raises:
            AuthenticationError: If the token is missing, forged or expired.
        """
        if not token or "." not in token:
            raise AuthenticationError("Missing admin session")
        issued, signature = token.split(".", 1)
        if not hmac.compare_digest(signature, self._sign(issued)):
            logger.warning("session_rejected", reason="bad_signature")
            raise AuthenticationError("Invalid admin session")
        try:
            issued_at = dt.datetime.fromtimestamp(int(issued), dt.timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise AuthenticationError("Invalid admin session") from e
        now = now or dt.datetime.now(dt.timezone.utc)
        if now - issued_at > self.max_age:
            logger.info("session_rejected", reason="expired")
            raise AuthenticationError("Admin session expired")


def check_password(given: str, expected: str) -> None:
    """Compare a login password in constant time.

    Raises:
        AuthenticationError: If the password is wrong or no password is configured.
    """
    if not expected:
        logger.warning("login_disabled", reason="no_admin_password")
        raise AuthenticationError("Admin login is not configured")
    if not hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8")):
        logger.info("login_failed")
        raise AuthenticationError("Invalid password")


def read_session_cookie(cookie_header: str | None) -> str | None:
    if not cookie_header:
        return None
    cookie = SimpleCookie()
    try:
        cookie.load(cookie_header)
    except CookieError:
        return None
    morsel = cookie.get(COOKIE_NAME)
    return morsel.value if morsel else None


def session_cookie(token: str, max_age_hours: int, secure: bool = False) -> str:
    """Set-Cookie header value for an admin session. Empty token clears it."""
    cookie = SimpleCookie()
    cookie[COOKIE_NAME] = token
    morsel = cookie[COOKIE_NAME]
    morsel["path"] = "/"
    morsel["httponly"] = True
    morsel["samesite"] = "Lax"
    morsel["max-age"] = max_age_hours * 3600 if token else 0
    if secure:
        morsel["secure"] = True
    return morsel.OutputString()
