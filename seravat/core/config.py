"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here. No scattered magic strings.
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for endpoints that call the exchange
            with user credentials.
        rate_limit_enabled: Master switch for rate limiting.
        exchange_base_url: Root URL of the spot exchange REST API.
        exchange_user_agent: User-Agent sent on every exchange call.
        probe_timeout_seconds: Deadline of the server-time probe.
        signed_call_timeout_seconds: Deadline of signed account calls.
        ticker_timeout_seconds: Deadline of the public price-ticker call.
        valuation_currency: Unit every holding is converted to.
        bridge_asset: Intermediate asset for two-hop conversions.
        dust_threshold: Holdings at or below this total are ignored.
        database_url: SQLAlchemy URL of the credential and portfolio store.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Seravat Gateway"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"
    rate_limit_enabled: bool = True

    exchange_base_url: str = "https://api.binance.com"
    exchange_user_agent: str = "Seravat-Trading-Bot/1.0"
    probe_timeout_seconds: float = 10.0
    signed_call_timeout_seconds: float = 15.0
    ticker_timeout_seconds: float = 10.0

    valuation_currency: str = "USDT"
    bridge_asset: str = "BTC"
    dust_threshold: Decimal = Decimal("0.001")

    database_url: str = "sqlite:///./seravat.db"


settings = Settings()
