"""Hyperliquid trade alerts: large-trade and liquidation notifications from the trade feed."""

from hyperliquid_trade_alerts.config import get_settings
from hyperliquid_trade_alerts.DI import Container
from hyperliquid_trade_alerts.feed import FeedConnection
from hyperliquid_trade_alerts.services import Dispatcher, EnrichmentClient, EventFilter

__version__ = "0.1.0"
__all__ = [
    "Container",
    "Dispatcher",
    "EnrichmentClient",
    "EventFilter",
    "FeedConnection",
    "get_settings",
]
