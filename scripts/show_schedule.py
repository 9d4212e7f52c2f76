#!/usr/bin/env python3
"""Print upcoming office hour sessions as a table or JSON.

Reads the local database by default, or a running server with --url.
Times are shown in the requested timezone; the first row carries the
countdown to the next session.

Run with: python scripts/show_schedule.py
Timezone: python scripts/show_schedule.py --tz Europe/Paris
Remote:   python scripts/show_schedule.py --url http://127.0.0.1:8000 --limit 5
JSON:     python scripts/show_schedule.py --json

Exit codes:
  0 = success
  1 = schedule could not be loaded (message on stderr)
"""

import argparse
import datetime as dt
import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.officehours.client import OfficeHoursClient  # noqa: E402
from src.officehours.config import get_config  # noqa: E402
from src.officehours.countdown import evaluate  # noqa: E402
from src.officehours.errors import OfficeHoursError  # noqa: E402
from src.officehours.logging import setup_logging_from_config  # noqa: E402
from src.officehours.models import UpcomingPage  # noqa: E402
from src.officehours.service import OfficeHoursService  # noqa: E402
from src.officehours.store import ScheduleStore  # noqa: E402
from src.officehours.timeconv import to_local_datetime  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show upcoming office hour sessions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--tz", type=str, default="UTC", help="Display timezone.")
    parser.add_argument("--offset", type=int, default=0, help="First session index.")
    parser.add_argument("--limit", type=int, default=10, help="Sessions to show.")
    parser.add_argument(
        "--url", type=str, default=None, help="Read from a running server instead."
    )
    parser.add_argument("--json", action="store_true", help="Output JSON.")
    return parser.parse_args()


def _load(args: argparse.Namespace) -> UpcomingPage:
    if args.url:
        return OfficeHoursClient(args.url).upcoming(offset=args.offset, limit=args.limit)
    config = get_config()
    store = ScheduleStore(
        config.db_path,
        default_time=config.default_time,
        default_zoom_link=config.default_zoom_link,
    )
    return OfficeHoursService(store, config).upcoming(offset=args.offset, limit=args.limit)


def _print_table(page: UpcomingPage, tz: str, now: dt.datetime) -> None:
    if not page.upcoming:
        print("No upcoming office hours scheduled.")
        return

    print(f"{'Date':<12} {'Time':<6} {'Zone':<20} {'Override':<9} Status")
    print("-" * 64)
    for occurrence in page.upcoming:
        local = to_local_datetime(occurrence.starts_at, tz)
        window = evaluate(occurrence, now)
        if window.is_live:
            status = "LIVE"
        elif window.remaining is None:
            status = "ended"
        else:
            r = window.remaining
            status = f"in {r.days}d {r.hours:02d}:{r.minutes:02d}:{r.seconds:02d}"
        print(
            f"{local:%Y-%m-%d}   {local:%H:%M}  {tz:<20} "
            f"{'yes' if occurrence.is_override else 'no':<9} {status}"
        )
    print("-" * 64)
    more = " (more available)" if page.has_more else ""
    print(f"{len(page.upcoming)} of {page.total} sessions{more}")
    print(f"Zoom: {page.zoom_link}")


def main() -> None:
    args = _parse_args()
    config = get_config()
    setup_logging_from_config(config)

    try:
        page = _load(args)
    except OfficeHoursError as e:
        _log(f"Could not load schedule: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(page.model_dump(mode="json", by_alias=True), indent=2))
        return
    _print_table(page, args.tz, dt.datetime.now(dt.timezone.utc))


if __name__ == "__main__":
    main()
