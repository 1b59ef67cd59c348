"""Application configuration via pydantic-settings."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import List, Literal

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
    app_name: str = "CarDnD"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Document store
    document_store: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./cardnd.db"
    db_echo: bool = False

    # JWT verification (tokens come from the external auth provider)
    jwt_secret_key: str = Field(default="your-super-secret-key-change-in-production")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Money
    currency: str = "PHP"
    currency_symbol: str = "₱"
    display_timezone: str = "Asia/Manila"

    # Service fee fallback, used when no platform settings document exists
    default_service_fee_threshold: Decimal = Decimal("2000")
    default_service_fee_above_threshold: Decimal = Decimal("5")
    default_service_fee_below_threshold: Decimal = Decimal("3")

    # CORS
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
