"""Domain models."""

from hyperliquid_trade_alerts.models.connection_state import ConnectionState
from hyperliquid_trade_alerts.models.trade import (
    AccountContext,
    CandidateEvent,
    Classification,
    EnrichedEvent,
    LiquidationDetails,
    RawTradeEvent,
    TradeSide,
)

__all__ = [
    "AccountContext",
    "CandidateEvent",
    "Classification",
    "ConnectionState",
    "EnrichedEvent",
    "LiquidationDetails",
    "RawTradeEvent",
    "TradeSide",
]
