"""Exceptions subpackage."""

from hyperliquid_trade_alerts.exceptions.exceptions import (
    DeliveryError,
    EnrichmentLookupError,
    FeedProtocolError,
    FeedTransportError,
    MaxReconnectAttemptsError,
    MissingRequiredConfigError,
    RateLimitError,
    RetryExhaustedError,
    TradeAlertsError,
)

__all__ = [
    "DeliveryError",
    "EnrichmentLookupError",
    "FeedProtocolError",
    "FeedTransportError",
    "MaxReconnectAttemptsError",
    "MissingRequiredConfigError",
    "RateLimitError",
    "RetryExhaustedError",
    "TradeAlertsError",
]
