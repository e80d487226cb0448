from hyperliquid_trade_alerts.services.enrichment.classifier import LiquidationClassifier
from hyperliquid_trade_alerts.services.enrichment.enrichment_client import (
    EnrichmentClient,
    account_context_from_state,
)
from hyperliquid_trade_alerts.services.enrichment.retry_policy import RetryPolicy

__all__ = [
    "EnrichmentClient",
    "LiquidationClassifier",
    "RetryPolicy",
    "account_context_from_state",
]
