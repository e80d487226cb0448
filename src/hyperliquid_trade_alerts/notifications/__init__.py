"""Notification subsystem."""

from hyperliquid_trade_alerts.notifications.notification_manager import (
    NotificationService,
)
from hyperliquid_trade_alerts.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from hyperliquid_trade_alerts.notifications.stylers import (
    TradeNotificationFormatter,
    format_notional,
)
from hyperliquid_trade_alerts.notifications.types import (
    NotificationMessage,
    TradeFormatter,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "NotificationMessage",
    "NotificationService",
    "TelegramNotifier",
    "TradeFormatter",
    "TradeNotificationFormatter",
    "format_notional",
]
