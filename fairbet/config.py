"""Configuration management for the FairBet engine.

Settings are loaded from environment variables (prefix ``FAIRBET_``) and an
optional ``.env`` file using pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Optional settings (all have defaults):
    - FAIRBET_API_BASE_URL: Base URL of the odds service
    - FAIRBET_API_KEY: Key sent in the X-API-Key header (required for live fetches)
    - FAIRBET_PAGE_SIZE: Bets per page request (max 500)
    - FAIRBET_MAX_CONCURRENT_PAGES: In-flight page requests during background fill
    - FAIRBET_REQUEST_TIMEOUT: Per-request timeout in seconds
    - FAIRBET_LOG_MODE: "development" (console) or "production" (JSON)
    - FAIRBET_ALLOWED_BOOKS: JSON list of books to keep (empty = keep all)
    - FAIRBET_MIN_BOOKS_FOR_STATS: Book quotes a bet needs to count in statistics
    """

    api_base_url: str = Field(default="http://localhost:8000")
    api_key: str = Field(default="", description="API key for the odds service")

    page_size: int = Field(default=500, ge=1, le=500)
    max_concurrent_pages: int = Field(default=3, ge=1, le=10)
    request_timeout: float = Field(default=15.0, gt=0)

    log_mode: str = Field(default="development")

    allowed_books: list[str] = Field(
        default_factory=list,
        description="Books kept on every fetched bet; empty keeps every book",
    )
    min_books_for_stats: int = Field(default=3, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="FAIRBET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are read once and reused; pass an explicit ``Settings`` to
    components that need different values (tests, CLI overrides).

    Returns:
        Settings instance with validated configuration
    """
    return Settings()
