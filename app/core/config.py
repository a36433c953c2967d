"""Application configuration."""
from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    store_timeout_seconds: float = 10.0

    # Sessions
    session_secret_key: str
    session_cookie_max_age: int = 60 * 60 * 24 * 30  # 30 days
    session_idle_timeout_seconds: int = 60 * 60 * 4  # 4 hours
    max_browsing_sessions: int = 10_000

    # Restaurant
    restaurant_name: str = "Restaurant"
    delivery_fee: Decimal = Decimal("15.00")

    # Catalog seeding (only applied to an empty catalog)
    seed_catalog: bool = False
    catalog_seed_file: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
