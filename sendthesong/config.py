"""Configuration management for Send the Song."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="STS_", extra="ignore")

    # Persistence
    store_backend: str = Field(default="sql", pattern="^(sql|supabase)$")
    database_url: str = "sqlite+aiosqlite:///./dev.db"

    # Hosted store (only needed if store_backend=supabase)
    supabase_url: str = Field(default="")
    supabase_key: str = Field(default="")

    # YouTube Data API (empty key disables title resolution)
    youtube_api_key: str = Field(default="")
    youtube_api_base: str = "https://www.googleapis.com/youtube/v3"
    youtube_timeout_seconds: float = 15.0

    # Title cache
    title_cache_backend: str = Field(default="memory", pattern="^(memory|redis)$")
    title_cache_max_entries: int = 1024
    title_cache_ttl_seconds: int = 86400  # 24 hours

    # Redis (only needed if title_cache_backend=redis)
    redis_url: str = "redis://localhost:6379/0"

    # Feed settings
    feed_page_size: int = 10
    search_debounce_ms: int = 500

    # CORS
    frontend_origin: str = "http://localhost:8000"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
