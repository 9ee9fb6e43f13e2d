"""Application configuration with environment-based settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "cadence"
    app_env: Literal["development", "testing", "production"] = "development"
    debug: bool = Field(default=False)
    secret_key: str = Field(default="change-me-in-production")
    log_json: bool = Field(
        default=False,
        description="Render log records as JSON lines instead of console output",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./cadence.db",
        description="Database connection string",
    )

    # Redis / Celery
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection for Celery broker",
    )
    celery_result_backend: str = Field(
        default="redis://localhost:6379/1",
        description="Celery result backend",
    )

    # API
    api_prefix: str = "/api/v1"
    api_token: str | None = Field(
        default=None,
        description="API token for admin endpoints",
    )
    cron_secret: str | None = Field(
        default=None,
        description="Bearer secret expected by scheduled maintenance endpoints",
    )

    # DNC lists
    dnc_api_base: str = Field(
        default="https://leads-dnc-api.ushealthgroup.com",
        description="Base URL shared by the company blacklist and national DNC lookups",
    )
    dnc_api_key: str = Field(default="", description="X-API-KEY header value")
    dnc_cache_ttl_blacklist_hours: float = Field(default=12, gt=0)
    dnc_cache_ttl_national_hours: float = Field(default=12, gt=0)
    dnc_cache_retention_days: int = Field(default=30, gt=0)
    dnc_request_timeout_seconds: float = Field(default=8.0, gt=0)

    # CRM
    crm_api_base: str = "https://services.leadconnectorhq.com"
    crm_api_version: str = "2021-07-28"
    crm_token_url: str = "https://services.leadconnectorhq.com/oauth/token"
    crm_client_id: str = ""
    crm_client_secret: str = ""
    crm_redirect_uri: str | None = Field(
        default=None,
        description="Redirect URI registered for the OAuth install flow",
    )
    token_refresh_buffer_minutes: int = 5

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
