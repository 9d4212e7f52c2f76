"""JSON HTTP API for office hours, served by the stdlib http.server.

Public routes:
    GET  /health
    GET  /occurrences?offset=0&limit=10
    GET  /occurrences/next
    POST /track-calendar            {"date": "YYYY-MM-DD"}

Admin routes (admin_session cookie required unless auth is disabled):
    POST   /admin/login             {"password": "..."}
    POST   /admin/logout
    GET    /admin/config?tz=Europe/Paris
    PUT    /admin/config            AdminConfig body, times local to its timezone
    GET    /admin/overrides?start=YYYY-MM-DD&end=YYYY-MM-DD&tz=...
    PUT    /overrides/{date}?tz=... {"isAvailable": true, "time": "HH:MM"}
    DELETE /overrides/{date}
"""

import datetime as dt
import json
import re
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

from src.officehours.auth import (
    SessionSigner,
    check_password,
    read_session_cookie,
    session_cookie,
)
from src.officehours.config import OfficeHoursConfig
from src.officehours.errors import AuthenticationError, DataUnavailable
from src.officehours.logging import get_logger
from src.officehours.models import AdminConfig, OverrideRequest
from src.officehours.service import OfficeHoursService

logger = get_logger(__name__)

_OVERRIDE_PATH = re.compile(r"^/overrides/(\d{4}-\d{2}-\d{2})$")
MAX_BODY_BYTES = 64 * 1024


class OfficeHoursServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        service: OfficeHoursService,
        config: OfficeHoursConfig,
        clock: Callable[[], dt.datetime] | None = None,
    ) -> None:
        super().__init__(address, OfficeHoursHandler)
        self.service = service
        self.config = config
        self.signer = SessionSigner(config.session_secret, config.session_max_age_hours)
        self.clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))


class OfficeHoursHandler(BaseHTTPRequestHandler):
    server: OfficeHoursServer
    server_version = "OfficeHours/1.0"

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------
    def log_message(self, format, *args):
        logger.debug("http_request", client=self.client_address[0], message=format % args)

    def _send_json(self, code: int, payload, headers: dict[str, str] | None = None) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _send_error(self, code: int, message: str) -> None:
        self._send_json(code, {"error": message})

    def _read_json(self) -> dict:
        try:
            length = int(self.headers.get("Content-Length", 0) or 0)
        except ValueError as e:
            raise ValueError("Invalid Content-Length") from e
        if length < 0:
            raise ValueError("Invalid Content-Length")
        if length > MAX_BODY_BYTES:
            raise ValueError(f"Request body larger than {MAX_BODY_BYTES} bytes")
        raw = self.rfile.read(length) if length else b""
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Request body is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        return data

    def _query(self) -> dict[str, str]:
        query = parse_qs(urlsplit(self.path).query)
        return {key: values[-1] for key, values in query.items()}

    def _require_admin(self) -> None:
        if self.server.config.auth_disabled:
            return
        token = read_session_cookie(self.headers.get("Cookie"))
        self.server.signer.verify(token, now=self.server.clock())

    def _dispatch(self, method: str) -> None:
        path = urlsplit(self.path).path.rstrip("/") or "/"
        try:
            self._route(method, path)
        except DataUnavailable as e:
            logger.error("request_failed", method=method, path=path, error=str(e))
            self._send_error(503, "could not load schedule")
        except AuthenticationError as e:
            self._send_error(401, str(e))
        except ValueError as e:
            self._send_error(400, str(e))

    def do_GET(self):
        self._dispatch("GET")

    def do_POST(self):
        self._dispatch("POST")

    def do_PUT(self):
        self._dispatch("PUT")

    def do_DELETE(self):
        self._dispatch("DELETE")

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------
    def _route(self, method: str, path: str) -> None:
        routes = {
            ("GET", "/health"): self._health,
            ("GET", "/occurrences"): self._occurrences,
            ("GET", "/occurrences/next"): self._next_occurrence,
            ("POST", "/track-calendar"): self._track_calendar,
            ("POST", "/admin/login"): self._login,
            ("POST", "/admin/logout"): self._logout,
            ("GET", "/admin/config"): self._get_config,
            ("PUT", "/admin/config"): self._put_config,
            ("GET", "/admin/overrides"): self._list_overrides,
        }
        handler = routes.get((method, path))
        if handler is not None:
            handler()
            return

        match = _OVERRIDE_PATH.match(path)
        if match and method in ("PUT", "DELETE"):
            day = dt.date.fromisoformat(match.group(1))
            if method == "PUT":
                self._put_override(day)
            else:
                self._delete_override(day)
            return

        self._send_error(404, "Not found")

    def _health(self) -> None:
        body = b"ok"
        self.send_response(200)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _occurrences(self) -> None:
        query = self._query()
        page = self.server.service.upcoming(
            now=self.server.clock(),
            offset=int(query.get("offset", 0)),
            limit=int(query.get("limit", 10)),
        )
        self._send_json(200, page.model_dump(mode="json", by_alias=True))

    def _next_occurrence(self) -> None:
        session = self.server.service.next_session(now=self.server.clock())
        if session is None:
            self._send_json(200, None)
            return
        self._send_json(200, session.model_dump(mode="json", by_alias=True))

    def _track_calendar(self) -> None:
        body = self._read_json()
        if "date" not in body:
            raise ValueError("date is required")
        day = dt.date.fromisoformat(str(body["date"]))
        user_ip = (
            self.headers.get("X-Forwarded-For")
            or self.headers.get("X-Real-IP")
            or self.client_address[0]
        )
        user_agent = self.headers.get("User-Agent", "unknown")
        self.server.service.track_calendar_addition(day, user_ip, user_agent)
        self._send_json(200, {"success": True})

    def _login(self) -> None:
        body = self._read_json()
        config = self.server.config
        check_password(str(body.get("password", "")), config.admin_password)
        token = self.server.signer.issue(now=self.server.clock())
        cookie = session_cookie(token, config.session_max_age_hours, config.cookie_secure)
        logger.info("admin_logged_in", client=self.client_address[0])
        self._send_json(200, {"success": True}, headers={"Set-Cookie": cookie})

    def _logout(self) -> None:
        cookie = session_cookie("", 0, self.server.config.cookie_secure)
        self._send_json(200, {"success": True}, headers={"Set-Cookie": cookie})

    def _get_config(self) -> None:
        self._require_admin()
        timezone = self._query().get("tz", "UTC")
        config = self.server.service.admin_config(timezone, self.server.clock().date())
        self._send_json(200, config.model_dump(mode="json", by_alias=True))

    def _put_config(self) -> None:
        self._require_admin()
        body = self._read_json()
        query = self._query()
        if "tz" in query:
            body["timezone"] = query["tz"]
        payload = AdminConfig.model_validate(body)
        self.server.service.save_admin_config(payload, self.server.clock().date())
        self._send_json(200, {"success": True})

    def _list_overrides(self) -> None:
        self._require_admin()
        query = self._query()
        today = self.server.clock().date()
        start = dt.date.fromisoformat(query["start"]) if "start" in query else today
        end = (
            dt.date.fromisoformat(query["end"])
            if "end" in query
            else start + dt.timedelta(days=self.server.config.horizon_days)
        )
        overrides = self.server.service.list_overrides(start, end, query.get("tz", "UTC"))
        self._send_json(200, {"overrides": overrides})

    def _put_override(self, day: dt.date) -> None:
        self._require_admin()
        request = OverrideRequest.model_validate(self._read_json())
        override = self.server.service.set_override(
            day, request.is_available, request.time, self._query().get("tz", "UTC")
        )
        self._send_json(200, override.model_dump(mode="json", by_alias=True))

    def _delete_override(self, day: dt.date) -> None:
        self._require_admin()
        removed = self.server.service.remove_override(day)
        self._send_json(200, {"success": True, "removed": removed})


def make_server(
    service: OfficeHoursService,
    config: OfficeHoursConfig,
    clock: Callable[[], dt.datetime] | None = None,
) -> OfficeHoursServer:
    return OfficeHoursServer((config.host, config.port), service, config, clock=clock)
