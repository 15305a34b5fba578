"""Store Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - max_profiles >= 1

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every field: a fresh checkout works with a local SQLite file
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wmstore.core.schema_constants import (
    APP_VERSION, DEFAULT_MAX_PROFILES, DEFAULT_PROFILE_NAME,
)


class Settings(BaseSettings):
    """Store settings from environment variables (prefix WMSTORE_)."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="WMSTORE_", case_sensitive=False,
    )

    # Storage
    database_url: str = "sqlite+aiosqlite:///wm_optimizer.db"
    database_echo: bool = False

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_sqlite_url(cls, v: str) -> str:
        """Plain sqlite:// URLs need the aiosqlite driver for the async engine."""
        if isinstance(v, str) and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    # Profiles
    max_profiles: int = DEFAULT_MAX_PROFILES
    default_profile_name: str = DEFAULT_PROFILE_NAME

    @field_validator("max_profiles")
    @classmethod
    def check_max_profiles(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_profiles must be at least 1")
        return v

    # Save documents
    app_version: str = APP_VERSION
    stamp_converted_app_version: bool = True

    # Invariant checks fail loudly when on; off logs and reads leniently
    strict_invariants: bool = True

    # Notifications
    storage_failure_notify_once: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
