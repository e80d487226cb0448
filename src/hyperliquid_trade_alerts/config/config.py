# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, FEED__COINS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hyperliquid_trade_alerts.exceptions import MissingRequiredConfigError


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "hyperliquid-trade-alerts"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"
    # Gives a previous instance (e.g. during a rolling deploy) time to release the bot.
    startup_delay_seconds: float = Field(default=5.0, ge=0.0, le=120.0)
    shutdown_timeout_seconds: float = Field(default=10.0, ge=0.0, le=120.0)


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    # aiohttp, httpx and python-telegram-bot loggers
    library_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/trade_alerts.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class FeedSettings(BaseSettings):
    """Hyperliquid websocket trade feed."""

    model_config = SettingsConfigDict(extra="ignore")

    url: str = Field(
        default="wss://api.hyperliquid.xyz/ws",
        description="Hyperliquid websocket URL.",
    )
    # Raw string from env so pydantic-settings does not try to JSON-decode it.
    coins_raw: str = Field(
        default="BTC",
        description="Coins to subscribe to, comma-separated. Env: FEED__COINS.",
        validation_alias="coins",
    )
    subscribe_delay_ms: int = Field(
        default=50,
        ge=0,
        le=5000,
        description="Pause between consecutive subscribe frames.",
    )
    max_reconnect_attempts: int = Field(default=10, ge=1, le=1000)
    reconnect_base_delay_ms: int = Field(default=1000, ge=1, le=60_000)
    connect_timeout_seconds: float = Field(default=15.0, ge=1.0, le=120.0)
    receive_timeout_seconds: float = Field(
        default=90.0,
        ge=1.0,
        le=3600.0,
        description="A socket silent for this long is treated as dead.",
    )
    heartbeat_seconds: float = Field(default=30.0, ge=1.0, le=600.0)
    buffer_size: int = Field(default=10_000, ge=1, le=1_000_000)

    @computed_field
    @property
    def coins(self) -> list[str]:
        """Parse comma-separated coins_raw into a list of stripped symbols, order kept."""
        if not self.coins_raw or not self.coins_raw.strip():
            return []
        return [s.strip() for s in self.coins_raw.split(",") if s.strip()]


class FilterSettings(BaseSettings):
    """Significance filter for trades."""

    model_config = SettingsConfigDict(extra="ignore")

    min_notional_value: float = Field(
        default=1_000_000.0,
        ge=0.0,
        description="Trades must have price * size strictly above this value.",
    )
    liquidations_only: bool = Field(
        default=False,
        description="Only notify trades classified as liquidations.",
    )


class EnrichmentSettings(BaseSettings):
    """Transaction detail lookups (Hyperliquid explorer/info API)."""

    model_config = SettingsConfigDict(extra="ignore")

    explorer_url: str = Field(
        default="https://rpc.hyperliquid.xyz/explorer",
        description="Explorer endpoint serving txDetails.",
    )
    info_url: str = Field(
        default="https://api.hyperliquid.xyz/info",
        description="Info endpoint serving clearinghouseState.",
    )
    tx_link_base: str = "https://app.hyperliquid.xyz/explorer/tx/"
    concurrency: int = Field(default=3, ge=1, le=100)
    pacing_delay_ms: int = Field(default=500, ge=0, le=60_000)
    max_retries: int = Field(default=3, ge=0, le=20)
    retry_base_delay_ms: int = Field(default=1000, ge=1, le=60_000)
    request_timeout_seconds: float = Field(default=10.0, ge=0.1, le=120.0)
    fetch_account_context: bool = Field(
        default=False,
        description="Also fetch clearinghouseState for the liquidated user.",
    )


class DedupeSettings(BaseSettings):
    """Seen-trade cache; the venue replays recent trades after each subscribe."""

    model_config = SettingsConfigDict(extra="ignore")

    ttl_seconds: float = Field(default=900.0, ge=1.0, le=86_400.0)
    maxsize: int = Field(default=50_000, ge=1, le=10_000_000)


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    chat_id: Optional[str] = Field(default=None, description="Telegram chat ID.")
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=3, ge=1, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False


class HealthSettings(BaseSettings):
    """Liveness endpoint."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, ENRICHMENT__CONCURRENCY.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    filter: FilterSettings = Field(default_factory=FilterSettings)
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)
    dedupe: DedupeSettings = Field(default_factory=DedupeSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as flat keys or nested dicts, e.g.:
        - from_env(filter={"min_notional_value": 50_000})
        - from_env(telegram={"enabled": False})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)

    def validate_required(self) -> None:
        """Check values the process cannot start without.

        Raises:
            MissingRequiredConfigError: If a required value is missing.
        """
        if self.telegram.enabled:
            if not self.telegram.api_key:
                raise MissingRequiredConfigError("TELEGRAM__API_KEY")
            if not self.telegram.chat_id:
                raise MissingRequiredConfigError("TELEGRAM__CHAT_ID")
        if not self.feed.coins:
            raise MissingRequiredConfigError("FEED__COINS")


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from hyperliquid_trade_alerts.config import get_settings

        settings = get_settings()
        threshold = settings.filter.min_notional_value
    """
    return Settings()
