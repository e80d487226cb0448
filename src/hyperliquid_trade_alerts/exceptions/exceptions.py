"""Custom exceptions for the feed, enrichment lookups and notification delivery."""

from __future__ import annotations


class TradeAlertsError(Exception):
    """Base exception for trade alert errors."""

    pass


class MissingRequiredConfigError(TradeAlertsError):
    """Raised when a required configuration value is missing."""

    pass


class FeedTransportError(TradeAlertsError):
    """Raised when the feed websocket fails or closes unexpectedly."""

    pass


class MaxReconnectAttemptsError(TradeAlertsError):
    """Raised when the feed gives up reconnecting."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Max reconnection attempts reached ({attempts})")
        self.attempts = attempts


class FeedProtocolError(TradeAlertsError):
    """Raised when an inbound frame cannot be parsed or has an unexpected shape."""

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class EnrichmentLookupError(TradeAlertsError):
    """Raised when a secondary lookup request fails."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class RateLimitError(EnrichmentLookupError):
    """Raised when the API returns HTTP 429 (Too Many Requests)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class RetryExhaustedError(TradeAlertsError):
    """Raised by RetryPolicy when every attempt failed."""

    def __init__(self, attempts: int, last_error: Exception | None) -> None:
        super().__init__(f"Gave up after {attempts} attempts: {last_error!r}")
        self.attempts = attempts
        self.last_error = last_error


class DeliveryError(TradeAlertsError):
    """Raised when a notification could not be delivered to a sink."""

    def __init__(self, message: str, *, channel: str | None = None) -> None:
        super().__init__(message)
        self.channel = channel
