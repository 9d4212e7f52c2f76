"""HTTP client for a running office hours server."""

from collections.abc import Iterator

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.officehours.errors import DataUnavailable, PermanentError
from src.officehours.logging import get_logger
from src.officehours.models import NextSession, ResolvedOccurrence, UpcomingPage

log = get_logger(__name__)


class OfficeHoursClient:
    """Read-only access to the public occurrence endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(0.5),
        retry=retry_if_exception_type(DataUnavailable),
        reraise=True,
    )
    def _get(self, path: str, params: dict | None = None):
        """GET a JSON endpoint.

        Raises:
            DataUnavailable: On connection errors or 5xx responses (retried).
            PermanentError: On any other non-200 response.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("request_failed", url=url, error=str(e))
            raise DataUnavailable(f"Cannot reach {url}: {e}") from e

        if resp.status_code >= 500:
            log.warning("server_error", url=url, status=resp.status_code)
            raise DataUnavailable(f"{url} returned {resp.status_code}")
        if resp.status_code != 200:
            raise PermanentError(f"{url} returned {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    def upcoming(self, offset: int = 0, limit: int = 10) -> UpcomingPage:
        data = self._get("/occurrences", params={"offset": offset, "limit": limit})
        return UpcomingPage.model_validate(data)

    def next_session(self) -> NextSession | None:
        data = self._get("/occurrences/next")
        return None if data is None else NextSession.model_validate(data)

    def iter_all(self, page_size: int = 10) -> Iterator[ResolvedOccurrence]:
        """Yield every upcoming session, following hasMore page by page."""
        offset = 0
        while True:
            page = self.upcoming(offset=offset, limit=page_size)
            yield from page.upcoming
            if not page.has_more or not page.upcoming:
                return
            offset += len(page.upcoming)
