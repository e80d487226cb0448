from hyperliquid_trade_alerts.notifications.stylers.notification_styler import (
    TradeNotificationFormatter,
    format_notional,
)

__all__ = ["TradeNotificationFormatter", "format_notional"]
