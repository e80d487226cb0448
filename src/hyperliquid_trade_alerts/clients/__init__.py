"""HTTP and API clients."""

from hyperliquid_trade_alerts.clients.http import AsyncHttpClient
from hyperliquid_trade_alerts.clients.hyperliquid import HyperliquidInfoClient

__all__ = [
    "AsyncHttpClient",
    "HyperliquidInfoClient",
]
