"""
Application Configuration

All settings loaded from environment variables (and an optional .env file).
Settings are built once at the composition root and passed to the services
that need them.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "StockCast Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Alpha Vantage (primary quote source)
    alpha_vantage_api_key: str = "demo"
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"

    # Yahoo Finance (secondary quote source, history source)
    yahoo_chart_base_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"

    # Per-attempt timeouts (seconds)
    quote_timeout_seconds: float = 5.0
    history_timeout_seconds: float = 8.0

    # History window
    history_range: str = "1mo"
    history_interval: str = "1d"
    history_max_points: int = 30

    # Feature Flags (a disabled provider is left out of its chain)
    enable_alpha_vantage: bool = True
    enable_yahoo_quote: bool = True
    enable_yahoo_history: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
