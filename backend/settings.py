"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.primary_catalog_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SECONDS_PER_DAY = 24 * 60 * 60


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Remote Catalogs (tried in this order)
    # -------------------------------------------------------------------------
    primary_catalog_url: str = Field(
        default="https://exercisedata.vercel.app/api/v1",
        description="Base URL of the primary ExerciseDB-style catalog",
    )
    ninjas_catalog_url: str = Field(
        default="https://api.api-ninjas.com/v1/exercises",
        description="API Ninjas exercises endpoint (first secondary catalog)",
    )
    ninjas_api_key: Optional[str] = Field(
        default=None,
        description="API Ninjas key; the catalog is skipped when unset",
    )
    free_catalog_url: str = Field(
        default="https://raw.githubusercontent.com/yuhonas/free-exercise-db/main/dist/exercises.json",
        description="Full JSON dump of free-exercise-db (second secondary catalog)",
    )
    free_catalog_media_base: str = Field(
        default="https://raw.githubusercontent.com/yuhonas/free-exercise-db/main/exercises/",
        description="Prefix for the relative image paths in free-exercise-db",
    )

    # -------------------------------------------------------------------------
    # Timeouts
    # -------------------------------------------------------------------------
    search_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout for interactive search calls",
    )
    background_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout for page, id and warmup calls",
    )

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------
    cache_ttl_days: float = Field(
        default=7,
        description="Days a cached record stays servable",
    )
    cache_snapshot_path: str = Field(
        default=".cache/exercise_cache.json",
        description="Durable snapshot file; empty string disables persistence",
    )
    popular_preload_pages: int = Field(
        default=30,
        ge=0,
        description="Pages fetched when the snapshot is missing or stale",
    )
    popular_preload_page_size: int = Field(
        default=10,
        ge=1,
        description="Records per warmup page",
    )
    preload_deadline_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Optional overall deadline for a batch preload",
    )
    initialize_on_startup: bool = Field(
        default=True,
        description="Restore the snapshot or warm up popular records when the app starts",
    )

    # -------------------------------------------------------------------------
    # Media CDN rewrite
    # -------------------------------------------------------------------------
    broken_media_host: str = Field(
        default="v1.cdn.exercisedb.dev",
        description="Media host known to serve broken links",
    )
    media_host_replacement: str = Field(
        default="static.exercisedb.dev",
        description="Host substituted for broken_media_host",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("cache_ttl_days")
    @classmethod
    def validate_cache_ttl(cls, v: float) -> float:
        """A zero or negative TTL would make every entry stale on insert."""
        if v <= 0:
            raise ValueError("cache_ttl_days must be positive")
        return v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def cache_ttl_seconds(self) -> float:
        """Cache TTL expressed in seconds."""
        return self.cache_ttl_days * SECONDS_PER_DAY

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
