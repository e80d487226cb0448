# -*- coding: utf-8 -*-
"""Bounded, retrying transaction-detail enrichment of candidate trades."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

from hyperliquid_trade_alerts.exceptions import (
    EnrichmentLookupError,
    RateLimitError,
    RetryExhaustedError,
)
from hyperliquid_trade_alerts.models.trade import (
    AccountContext,
    CandidateEvent,
    EnrichedEvent,
)
from hyperliquid_trade_alerts.services.enrichment.classifier import LiquidationClassifier
from hyperliquid_trade_alerts.services.enrichment.retry_policy import RetryPolicy
from hyperliquid_trade_alerts.utils.validation import is_hex_address, mask_address

if TYPE_CHECKING:
    from hyperliquid_trade_alerts.clients.hyperliquid import (
        ClearinghouseStateSchema,
        HyperliquidInfoClient,
    )

T = TypeVar("T")


class EnrichmentClient:
    """Fetches txDetails for each candidate and classifies it.

    At most `concurrency` candidates hold a permit at once; waiters are
    admitted in arrival order and completions are unordered. Each lookup is
    retried per RetryPolicy and bounded by request_timeout_seconds. Exhausting
    the retries drops that event only (enrich() returns None).
    """

    def __init__(
        self,
        info_client: HyperliquidInfoClient,
        *,
        retry_policy: RetryPolicy | None = None,
        classifier: LiquidationClassifier | None = None,
        concurrency: int = 3,
        request_timeout_seconds: float = 10.0,
        fetch_account_context: bool = False,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            info_client: Hyperliquid lookup client (injected).
            retry_policy: Attempt schedule; defaults to RetryPolicy().
            classifier: Liquidation classifier; defaults to LiquidationClassifier().
            concurrency: Max simultaneous candidates in the lookup stage.
            request_timeout_seconds: Bound on each individual network call.
            fetch_account_context: Also fetch the liquidated user's account state.
            sleep: Sleep used for pacing/backoff (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._info = info_client
        self._retry = retry_policy or RetryPolicy()
        self._classifier = classifier or LiquidationClassifier()
        self._concurrency = concurrency
        self._semaphore = asyncio.Semaphore(concurrency)
        self._request_timeout = request_timeout_seconds
        self._fetch_account_context = fetch_account_context
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def in_flight(self) -> int:
        """Candidates currently holding a permit."""
        return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        return self._peak_in_flight

    async def enrich(self, candidate: CandidateEvent) -> Optional[EnrichedEvent]:
        """Look up and classify a candidate.

        Returns:
            The enriched event, or None if the transaction lookup failed on
            every attempt (the event is dropped and logged once).
        """
        trade = candidate.trade
        with bound_contextvars(trade_hash=trade.hash, trade_coin=trade.coin):
            async with self._semaphore:
                self._in_flight += 1
                self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
                try:
                    return await self._enrich_with_permit(candidate)
                finally:
                    self._in_flight -= 1

    async def _enrich_with_permit(self, candidate: CandidateEvent) -> Optional[EnrichedEvent]:
        tx_hash = candidate.trade.hash
        try:
            tx_details = await self._retry.run(
                lambda: self._bounded(self._info.tx_details(tx_hash)),
                on_failure=self._log_failure,
                sleep=self._sleep,
            )
        except RetryExhaustedError as e:
            self._logger.error(
                "enrichment_dropped",
                enrichment_attempts=e.attempts,
                error_type=type(e.last_error).__name__ if e.last_error else None,
                error_message=str(e.last_error) if e.last_error else None,
                trade_notional=candidate.notional_value,
            )
            return None

        classification = self._classifier.classify(tx_details)
        context: AccountContext | None = None
        liquidated_user = (
            classification.liquidation.liquidated_user if classification.liquidation else None
        )
        if (
            self._fetch_account_context
            and classification.is_liquidation
            and is_hex_address(liquidated_user)
        ):
            context = await self._account_context(liquidated_user or "", candidate.trade.coin)

        self._logger.debug(
            "enrichment_complete",
            trade_is_liquidation=classification.is_liquidation,
            trade_notional=candidate.notional_value,
            enrichment_has_context=context is not None,
        )
        return EnrichedEvent(
            candidate=candidate,
            is_liquidation=classification.is_liquidation,
            liquidation=classification.liquidation,
            context=context,
        )

    async def _account_context(self, user: str, coin: str) -> AccountContext | None:
        """Best-effort account snapshot; failure leaves the event without context."""
        try:
            state = await self._retry.run(
                lambda: self._bounded(self._info.clearinghouse_state(user)),
                on_failure=self._log_failure,
                sleep=self._sleep,
            )
        except RetryExhaustedError as e:
            self._logger.warning(
                "enrichment_context_unavailable",
                enrichment_user_masked=mask_address(user),
                error_type=type(e.last_error).__name__ if e.last_error else None,
            )
            return None
        return account_context_from_state(state, coin)

    async def _bounded(self, call: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._request_timeout):
                return await call
        except TimeoutError as e:
            raise EnrichmentLookupError(
                f"lookup timed out after {self._request_timeout}s", cause=e
            ) from e

    def _log_failure(self, attempt: int, error: BaseException) -> None:
        if isinstance(error, RateLimitError):
            self._logger.warning(
                "enrichment_rate_limited",
                enrichment_attempt=attempt + 1,
                enrichment_max_attempts=self._retry.max_attempts,
                http_retry_after_seconds=error.retry_after,
            )
        else:
            self._logger.info(
                "enrichment_attempt_failed",
                enrichment_attempt=attempt + 1,
                enrichment_max_attempts=self._retry.max_attempts,
                error_type=type(error).__name__,
                error_message=str(error),
            )


def account_context_from_state(state: ClearinghouseStateSchema, coin: str) -> AccountContext:
    """Extract account value, margin and the coin's position from clearinghouseState."""
    summary = state.get("marginSummary") or {}
    position_size: float | None = None
    entry_price: float | None = None
    for asset_position in state.get("assetPositions") or []:
        position = asset_position.get("position") or {}
        if position.get("coin") == coin:
            position_size = _to_float(position.get("szi"))
            entry_price = _to_float(position.get("entryPx"))
            break
    return AccountContext(
        account_value=_to_float(summary.get("accountValue")),
        margin_used=_to_float(summary.get("totalMarginUsed")),
        position_size=position_size,
        entry_price=entry_price,
    )


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
