"""Notification strategies."""

from hyperliquid_trade_alerts.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from hyperliquid_trade_alerts.notifications.strategies.console import ConsoleNotifier
from hyperliquid_trade_alerts.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
]
