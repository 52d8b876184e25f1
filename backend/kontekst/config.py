"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Durations are expressed in the unit named by the field suffix

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - anthropic_api_key defaults to empty: generation fails fast with ConfigurationError
      instead of calling the provider with a placeholder key
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://kontekst:kontekst@db:5432/kontekst"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Managed hosts provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Anthropic (article generation)
    anthropic_api_key: str = ""
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 300
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000
    article_model: str = "claude-sonnet-4-5"
    article_max_tokens: int = 8000

    # Rounds & content votes
    round_duration_hours: int = 72
    next_vote_duration_hours: int = 72
    claim_settle_delay_seconds: float = 2.0
    expiry_latch_size: int = 1024
    expiry_watch_enabled: bool = True
    expiry_watch_interval_seconds: float = 60.0

    # Site / SEO
    site_url: str = "https://news-kontekst.ru"
    site_name: str = "Kontekst"
    site_description: str = "Independent news and analysis"
    default_og_image: str = "https://news-kontekst.ru/og-image.jpg"
    og_cache_max_age: int = 3600
    og_edge_max_age: int = 86_400
    news_sitemap_window_days: int = 2

    # Premium
    premium_period_days: int = 30
    premium_yearly_days: int = 365

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
