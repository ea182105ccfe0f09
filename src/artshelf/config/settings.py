"""Application settings loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = "sqlite+aiosqlite:///./artshelf.db"
    echo: bool = False
    pool_pre_ping: bool = True
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600


# Hey future me - scan_path here is only the ENV FALLBACK! The real scan path lives in the
# app_settings table (key "scanPath") and wins whenever it is set. AppSettingsService.init_defaults()
# copies this value into the DB on first startup so the Settings UI shows it.
class StorageSettings(BaseModel):
    """Filesystem locations."""

    scan_path: str | None = None


class ScannerSettings(BaseModel):
    """Library scanner tuning."""

    # Artists reconciled in parallel. Keep 1 for SQLite (single writer).
    max_concurrency: int = Field(default=1, ge=1, le=32)
    # Upper bound on how many missing file paths are echoed back in a scan summary
    missing_files_report_limit: int = Field(default=200, ge=0)
    include_hidden: bool = False


class ObservabilitySettings(BaseModel):
    """Logging output settings."""

    log_json_format: bool = False


class Settings(BaseSettings):
    """Top-level application settings.

    Nested values use a double underscore, e.g. ``ARTSHELF_DATABASE__URL`` or
    ``ARTSHELF_SCANNER__MAX_CONCURRENCY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTSHELF_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "artshelf"
    log_level: str = "INFO"
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {value}")
        return level

    def get_sqlite_db_path(self) -> Path | None:
        """Return the SQLite database file path, or None for other backends."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, raw_path = url.partition(":///")
        if not raw_path or raw_path.startswith(":memory:"):
            return None
        return Path(raw_path)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
