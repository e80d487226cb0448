"""Logging setup."""

from hyperliquid_trade_alerts.logging.config import configure_logging

__all__ = ["configure_logging"]
