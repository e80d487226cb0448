"""Hyperliquid API client and response schemas."""

from hyperliquid_trade_alerts.clients.hyperliquid.info_api import HyperliquidInfoClient
from hyperliquid_trade_alerts.clients.hyperliquid.schema import (
    ClearinghouseStateSchema,
    TxDetailsSchema,
)

__all__ = [
    "ClearinghouseStateSchema",
    "HyperliquidInfoClient",
    "TxDetailsSchema",
]
