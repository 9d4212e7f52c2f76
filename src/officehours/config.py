"""Office hours configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class OfficeHoursConfig(BaseSettings):
    """Office hours configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Storage
    db_path: str = Field(
        default="data/office_hours.db",
        description="SQLite database holding schedule, overrides and config",
    )

    # Resolution
    horizon_days: int = Field(
        default=30,
        ge=1,
        description="Calendar days scanned when listing upcoming sessions",
    )
    next_horizon_days: int = Field(
        default=14,
        ge=1,
        description="Calendar days scanned when looking up the next session",
    )
    default_time: str = Field(
        default="15:00:00",
        description="UTC time used for weekly schedule rows without a time",
    )
    default_zoom_link: str = Field(
        default="https://zoom.us/j/example",
        description="Zoom link seeded into a fresh database",
    )

    # Admin session
    admin_password: str = Field(
        default="",
        description="Password for the admin dashboard (login disabled when empty)",
    )
    session_secret: str = Field(
        default="change-me",
        description="HMAC key used to sign admin session cookies",
    )
    session_max_age_hours: int = Field(
        default=24,
        description="Lifetime of an admin session cookie",
    )
    auth_disabled: bool = Field(
        default=False,
        description="Skip the admin session check (local development only)",
    )
    cookie_secure: bool = Field(
        default=False,
        description="Mark the session cookie Secure (set behind HTTPS)",
    )

    # HTTP server
    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8000, description="Bind port")

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "OFFICE_HOURS_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: OfficeHoursConfig | None = None


def get_config() -> OfficeHoursConfig:
    """Get the office hours configuration singleton.

    Returns:
        OfficeHoursConfig: Office hours configuration instance
    """
    global _config
    if _config is None:
        _config = OfficeHoursConfig()
    return _config
