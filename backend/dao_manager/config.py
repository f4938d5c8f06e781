"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Cache TTLs and status thresholds are policy, read from here, never hardcoded in core/
    - Invalid policy (non-positive TTL, safe threshold below urgent) fails at startup

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def to_asyncpg_url(url: str) -> str:
    """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://dao:dao@db:5432/dao"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Derived-state cache
    cache_enabled: bool = True
    stats_cache_ttl_seconds: float = Field(60.0, gt=0)
    task_progress_cache_ttl_seconds: float = Field(120.0, gt=0)

    # Status policy — days left before date_depot
    status_urgent_within_days: int = Field(3, ge=0)
    status_safe_from_days: int = Field(5, ge=0)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return to_asyncpg_url(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_status_thresholds(self) -> "Settings":
        if self.status_safe_from_days < self.status_urgent_within_days:
            raise ValueError(
                "status_safe_from_days must be >= status_urgent_within_days",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
