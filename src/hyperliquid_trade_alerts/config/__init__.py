"""Configuration subpackage."""

from hyperliquid_trade_alerts.config.config import (
    AppSettings,
    ConsoleNotificationSettings,
    DedupeSettings,
    EnrichmentSettings,
    FeedSettings,
    FilterSettings,
    HealthSettings,
    LoggingSettings,
    Settings,
    TelegramNotificationSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "ConsoleNotificationSettings",
    "DedupeSettings",
    "EnrichmentSettings",
    "FeedSettings",
    "FilterSettings",
    "HealthSettings",
    "LoggingSettings",
    "Settings",
    "TelegramNotificationSettings",
    "get_settings",
]
