from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):

    api_host: str = Field(default="localhost", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    # Authentication Configuration
    authentication_enabled: bool = Field(default=True, description="Require an admin token for aggregation write endpoints")
    admin_api_token: Optional[str] = Field(default=None, description="Bearer token accepted for admin aggregation endpoints")

    # News Provider API Keys (a missing key disables the provider)
    news_api_key: Optional[str] = Field(default=None, description="NewsAPI.org API key")
    gnews_api_key: Optional[str] = Field(default=None, description="GNews API key")
    mediastack_api_key: Optional[str] = Field(default=None, description="MediaStack access key")
    newsdata_api_key: Optional[str] = Field(default=None, description="NewsData.io API key")

    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5000",
            "http://localhost:5173",
        ],
        description="Allowed CORS origins",
        validation_alias=AliasChoices("CORS_ALLOWED_ORIGINS", "ALLOWED_ORIGINS"),
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    # Scheduler Configuration
    scheduler_enabled: bool = Field(default=True, description="Start the aggregation scheduler with the API")
    scheduler_interval_seconds: float = Field(
        default=3600,
        description="Seconds between scheduler ticks (each tick scans every job)"
    )

    # Aggregation Pipeline Settings
    relevance_threshold: float = Field(
        default=0.2,
        description="Articles scoring at or below this are dropped when a job has keywords"
    )
    dedup_prefix_length: int = Field(
        default=50,
        description="Number of lowercased title characters compared when deduplicating"
    )
    article_store_capacity: int = Field(default=1000, description="Maximum number of articles retained in memory")
    max_extracted_keywords: int = Field(default=10, description="Maximum keywords extracted per article")
    min_keyword_length: int = Field(default=4, description="Minimum token length kept by keyword extraction")
    no_keyword_relevance_score: float = Field(
        default=0.5,
        description="Relevance score given to every article when a job has no keywords"
    )

    # Upstream HTTP Settings
    request_timeout_seconds: float = Field(default=15.0, description="Timeout for a single upstream news API request")
    newsapi_request_delay_seconds: float = Field(default=1.0, description="Pause between NewsAPI per-country requests")
    gnews_request_delay_seconds: float = Field(default=2.0, description="Pause between GNews per-country requests")
    mediastack_request_delay_seconds: float = Field(default=1.0, description="Pause between MediaStack per-country requests")
    newsdata_request_delay_seconds: float = Field(default=2.0, description="Pause between NewsData per-country requests")

    # Job Defaults
    default_job_name: str = Field(default="Untitled Job", description="Name given to jobs created without one")
    default_job_frequency: str = Field(default="daily", description="Frequency given to jobs created without one")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value):
        if value is None:
            return value
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "admin_api_token", "news_api_key", "gnews_api_key", "mediastack_api_key", "newsdata_api_key",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    model_config = SettingsConfigDict(
        env_file=[".env", ".env.local"],  # .env.local takes precedence over .env
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
