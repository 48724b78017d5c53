from typing import Annotated, Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Company Intranet"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://intranet:intranet@db:5432/intranet"
    # Schema is owned by Alembic; enable only for throwaway local databases.
    auto_create_tables: bool = False
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000", "http://localhost:8000"]
    timezone: str = "Asia/Seoul"
    # Empty allows every address. Entries ending in "." match as a prefix ("192.168.0.").
    allowed_attendance_ips: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", "allowed_attendance_ips", mode="before")
    @classmethod
    def _split_comma_list(cls, value: Any) -> Any:
        """Accept "a,b,c" from the environment as well as a real list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings(settings: Settings | None = None) -> None:
    """Replace the cached settings (for testing)."""
    global _settings
    _settings = settings
