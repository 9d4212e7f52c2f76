import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.officehours.config import OfficeHoursConfig
from src.officehours.service import OfficeHoursService
from src.officehours.store import ScheduleStore


@pytest.fixture
def config(tmp_path) -> OfficeHoursConfig:
    return OfficeHoursConfig(
        _env_file=None,
        db_path=str(tmp_path / "office_hours.db"),
        admin_password="secret",
        session_secret="test-secret",
        default_zoom_link="https://zoom.us/j/123",
        host="127.0.0.1",
        port=0,
    )


@pytest.fixture
def store(config) -> ScheduleStore:
    store = ScheduleStore(
        config.db_path,
        default_time=config.default_time,
        default_zoom_link=config.default_zoom_link,
    )
    store.init_db()
    return store


@pytest.fixture
def service(store, config) -> OfficeHoursService:
    return OfficeHoursService(store, config)
