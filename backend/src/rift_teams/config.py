"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Database path (DuckDB file)
    database_path: str = "data/rift_teams.duckdb"

    # Team generation
    trial_count: int = Field(default=100, ge=1)
    exclusion_threshold: int = Field(default=8, ge=1)
    generation_workers: int = Field(default=1, ge=1)

    # Rating updates
    rating_delta: int = Field(default=50, ge=0)
    rating_ceiling: int = Field(default=10000, ge=0)
    update_workers: int = Field(default=10, ge=1)

    # Ratio used when deriving a secondary rating from a primary one
    secondary_rating_ratio: float = Field(default=0.8, gt=0, le=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
