"""Application configuration from environment variables."""

from functools import lru_cache
from typing import Literal
from urllib.parse import quote_plus
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Gym Session Tracker API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Document store: "sql" (PostgreSQL via SQLAlchemy) or "memory" (local dev)
    store_backend: Literal["sql", "memory"] = "sql"

    # Database (PostgreSQL)
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "gym_tracker"
    database_ssl_mode: str = "disable"

    # Pool (production tuning)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Exercise catalog (ExerciseDB on RapidAPI)
    exercise_api_base_url: str = "https://exercisedb.p.rapidapi.com"
    exercise_api_host: str = "exercisedb.p.rapidapi.com"
    exercise_api_key: str = ""  # Set in .env - never commit
    exercise_api_timeout: float = 15.0

    # Workout session / statistics
    timezone: str = "UTC"  # Local calendar used for day/week/month buckets
    first_weekday: int = 0  # 0 = Monday ... 6 = Sunday
    tick_interval_seconds: float = 1.0
    session_idle_timeout_seconds: float = 3600.0  # Idle per-user machines are dropped after this
    history_limit: int = 50
    stats_history_limit: int = 100

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=require") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def database_url(self) -> str:
        """Synchronous URL for Alembic and tooling."""
        return self._build_db_url(scheme="postgresql", ssl_query=f"sslmode={self.database_ssl_mode}")

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver)."""
        ssl = "require" if self.database_ssl_mode != "disable" else "disable"
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={ssl}")

    @property
    def tzinfo(self) -> ZoneInfo:
        """Zone for calendar-day bucketing of workout start times."""
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
