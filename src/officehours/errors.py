"""Error hierarchy for office hours resolution and storage.

Transient failures (store unreachable) are retried by tenacity decorators and
surface to callers as DataUnavailable once retries are exhausted. Permanent
failures (bad input, bad credentials) are never retried.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(DataUnavailable), stop=stop_after_attempt(3))
    def get_weekly_schedule(self):
        ...
"""


class OfficeHoursError(Exception):
    """Base exception for all office hours errors."""

    pass


class TransientError(OfficeHoursError):
    """Temporary failure that may succeed on retry."""

    pass


class DataUnavailable(TransientError):
    """Schedule or override data could not be read or written.

    Distinct from an empty schedule: callers render "could not load schedule"
    for this and "no upcoming sessions" for an empty result.
    """

    pass


class PermanentError(OfficeHoursError):
    """Failure that won't succeed on retry."""

    pass


class InvalidTimeFormat(PermanentError, ValueError):
    """A time-of-day string is not HH:MM or HH:MM:SS."""

    pass


class InvalidTimezone(PermanentError, ValueError):
    """A timezone identifier is not a known IANA zone."""

    pass


class AuthenticationError(PermanentError):
    """Missing, expired or forged admin session, or wrong password."""

    pass
