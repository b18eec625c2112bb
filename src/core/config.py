from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include optional integrations.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Swap Station Backend"
    environment: str = "development"
    api_prefix: str = ""
    cors_allow_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    stripe_secret_key: Optional[str] = Field(default=None, alias="STRIPE_SECRET_KEY")
    stripe_api_base: str = Field(default="https://api.stripe.com/v1", alias="STRIPE_API_BASE")
    stripe_timeout_seconds: float = Field(default=30.0, alias="STRIPE_TIMEOUT_SECONDS")
    stripe_page_size: int = Field(default=100, ge=1, le=100, alias="STRIPE_PAGE_SIZE")

    reporting_timezone: str = Field(default="America/Chicago", alias="REPORTING_TIMEZONE")
    rents_report_timeout_seconds: float = Field(
        default=120.0, gt=0, alias="RENTS_REPORT_TIMEOUT_SECONDS"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]


@lru_cache
def get_reporting_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().reporting_timezone)
