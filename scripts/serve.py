#!/usr/bin/env python3
"""Run the office hours JSON API.

Initialises the SQLite database (creating tables and seeding the default
Mon-Fri schedule on first run) and serves until interrupted.

Run with: python scripts/serve.py
Port:     python scripts/serve.py --port 9000
Dev:      OFFICE_HOURS_AUTH_DISABLED=true python scripts/serve.py

Settings come from OFFICE_HOURS_* environment variables or .env.
"""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.officehours.config import get_config  # noqa: E402
from src.officehours.logging import get_logger, setup_logging_from_config  # noqa: E402
from src.officehours.server import make_server  # noqa: E402
from src.officehours.service import OfficeHoursService  # noqa: E402
from src.officehours.store import ScheduleStore  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the office hours API.")
    parser.add_argument("--host", type=str, default=None, help="Bind address.")
    parser.add_argument("--port", type=int, default=None, help="Bind port.")
    parser.add_argument(
        "--db", type=str, default=None, help="SQLite database path."
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    config = get_config()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.db:
        config.db_path = args.db

    setup_logging_from_config(config)
    log = get_logger("serve")

    if not config.admin_password and not config.auth_disabled:
        log.warning("admin_login_disabled", reason="OFFICE_HOURS_ADMIN_PASSWORD not set")

    store = ScheduleStore(
        config.db_path,
        default_time=config.default_time,
        default_zoom_link=config.default_zoom_link,
    )
    store.init_db()
    server = make_server(OfficeHoursService(store, config), config)

    log.info("server_listening", host=config.host, port=config.port, db=config.db_path)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("server_stopping")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
