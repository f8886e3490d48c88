"""
Application settings (Pydantic Settings).

Shared by the web process, the build worker and the scripts. Env var names are the
upper-cased field names (BUILD_POLL_INTERVAL, BUILD_NIGHTLY_AT, OUTPUT_DIR, ...).
"""
from datetime import timedelta
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from clubportal.core.clock import parse_clock, parse_go_duration

_package_dir = Path(__file__).resolve().parent
# .env at the repository root (parent of clubportal/)
_env_path = _package_dir.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/clubportal.db"
    auto_create_schema: bool = True

    # Sessions: SECRET_KEY must be set in production
    secret_key: str = "dev-secret-change-me"
    session_ttl: timedelta = timedelta(hours=24)
    cookie_secure: bool = False
    password_min_length: int = 8
    default_locale: str = "de"

    # Static site output
    output_dir: str = "public"
    template_dir: str = str(_package_dir / "templates" / "site")
    asset_dir: str = str(_package_dir / "static" / "site")

    # Build queue
    build_debounce: timedelta = timedelta(seconds=10)
    build_poll_interval: timedelta = timedelta(seconds=5)
    build_retry_delay: timedelta = timedelta(minutes=5)
    build_nightly_at: str = "03:00"
    build_lease: timedelta = timedelta(hours=1)  # 0 = never reclaim a running task

    seed_example_club: bool = True

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator(
        "session_ttl", "build_debounce", "build_poll_interval", "build_retry_delay", "build_lease",
        mode="before",
    )
    @classmethod
    def parse_duration(cls, v):
        if isinstance(v, str):
            parsed = parse_go_duration(v)
            if parsed is not None:
                return parsed
        return v

    @field_validator(
        "session_ttl", "build_debounce", "build_poll_interval", "build_retry_delay", "build_lease",
        mode="after",
    )
    @classmethod
    def non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("duration must not be negative")
        return v

    @field_validator("build_poll_interval", mode="after")
    @classmethod
    def positive_poll(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("poll interval must be positive")
        return v

    @field_validator("build_nightly_at", mode="after")
    @classmethod
    def valid_nightly_at(cls, v: str) -> str:
        hour, minute = parse_clock(v)
        return f"{hour:02d}:{minute:02d}"

    @field_validator("password_min_length", mode="after")
    @classmethod
    def min_password_length(cls, v: int) -> int:
        return v if v > 0 else 8


settings = Settings()
