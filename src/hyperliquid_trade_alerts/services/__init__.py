# -*- coding: utf-8 -*-
"""Application services."""

from hyperliquid_trade_alerts.services.dispatching import (
    DispatchOutcome,
    Dispatcher,
    DispatchStats,
)
from hyperliquid_trade_alerts.services.enrichment import (
    EnrichmentClient,
    LiquidationClassifier,
    RetryPolicy,
)
from hyperliquid_trade_alerts.services.filtering import EventFilter

__all__ = [
    "DispatchOutcome",
    "DispatchStats",
    "Dispatcher",
    "EnrichmentClient",
    "EventFilter",
    "LiquidationClassifier",
    "RetryPolicy",
]
