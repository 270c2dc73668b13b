from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Firecrawl provider
    firecrawl_api_key: Optional[str] = None
    firecrawl_base_url: str = "https://api.firecrawl.dev"
    http_timeout: float = 60.0  # seconds, per provider request

    # Detailed single-page scrape
    scrape_wait_for_ms: int = 3000
    scrape_timeout_ms: int = 30000
    scrape_max_age_ms: int = 3_600_000  # reuse provider-cached pages younger than 1 h
    scrape_include_tags: List[str] = []
    scrape_exclude_tags: List[str] = ["noscript", "iframe"]

    # Multi-page crawl
    crawl_poll_interval: float = 2.0  # seconds between status polls
    crawl_timeout: float = 120.0  # seconds before giving up on a crawl job

    # Analysis
    default_max_pages: int = 10
    analysis_timeout: Optional[float] = 180.0  # seconds, per provider call

    # API
    analyze_rate_limit: str = "5/minute"

    # Logging
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
