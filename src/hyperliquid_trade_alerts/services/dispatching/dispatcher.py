# -*- coding: utf-8 -*-
"""Pipeline driver: feed -> dedupe -> filter -> enrichment -> formatter -> notification.

The feed loop never waits on enrichment; each candidate runs in its own
tracked task so one slow lookup cannot stall intake.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from hyperliquid_trade_alerts.exceptions import DeliveryError
from hyperliquid_trade_alerts.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from hyperliquid_trade_alerts.feed import FeedConnection
    from hyperliquid_trade_alerts.models.trade import CandidateEvent, RawTradeEvent
    from hyperliquid_trade_alerts.notifications import NotificationService, TradeFormatter
    from hyperliquid_trade_alerts.services.enrichment import EnrichmentClient
    from hyperliquid_trade_alerts.services.filtering import EventFilter
    from hyperliquid_trade_alerts.utils.dedupe import SeenTradeCache


class DispatchOutcome(str, Enum):
    """Terminal state of one candidate."""

    NOTIFIED = "notified"
    DROPPED = "dropped"
    """Lookup retries exhausted."""
    SKIPPED = "skipped"
    """Not a liquidation while liquidations_only is set."""
    DELIVERY_FAILED = "delivery_failed"


@dataclass
class DispatchStats:
    received: int = 0
    duplicates: int = 0
    rejected: int = 0
    submitted: int = 0
    notified: int = 0
    dropped: int = 0
    skipped: int = 0
    delivery_failed: int = 0


class Dispatcher:
    """Consumes the feed and turns significant trades into notifications."""

    def __init__(
        self,
        feed: FeedConnection,
        event_filter: EventFilter,
        enrichment_client: EnrichmentClient,
        formatter: TradeFormatter,
        notification_service: NotificationService,
        seen_trades: SeenTradeCache,
        *,
        liquidations_only: bool = False,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            feed: Source of RawTradeEvent.
            event_filter: Notional threshold filter.
            enrichment_client: Bounded txDetails lookups.
            formatter: Renders EnrichedEvent to text.
            notification_service: Delivery fan-out.
            seen_trades: Dedupe cache for replayed trades.
            liquidations_only: Skip enriched events that are not liquidations.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._feed = feed
        self._filter = event_filter
        self._enrichment = enrichment_client
        self._formatter = formatter
        self._notifications = notification_service
        self._seen = seen_trades
        self._liquidations_only = liquidations_only
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._tasks: set[asyncio.Task[DispatchOutcome]] = set()
        self._stats = DispatchStats()
        self._closing = False

    @property
    def stats(self) -> DispatchStats:
        return self._stats

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self) -> None:
        """Consume the feed until it ends.

        Raises:
            MaxReconnectAttemptsError: Propagated from the feed.
        """
        self._logger.info("dispatcher_started")
        try:
            async for trade in self._feed.events():
                self.submit(trade)
        finally:
            self._logger.info("dispatcher_feed_ended", **self._stats_fields())

    def submit(self, trade: RawTradeEvent) -> Optional[asyncio.Task[DispatchOutcome]]:
        """Admit one trade. Returns the enrichment task, or None if it was not admitted."""
        if self._closing:
            return None
        self._stats.received += 1
        if not self._seen.check_and_add(trade):
            self._stats.duplicates += 1
            self._logger.debug("dispatcher_duplicate_trade", trade_key=trade.key)
            return None
        candidate = self._filter.filter(trade)
        if candidate is None:
            self._stats.rejected += 1
            return None

        self._stats.submitted += 1
        self._logger.info(
            "dispatcher_candidate_accepted",
            trade_hash=trade.hash,
            trade_coin=trade.coin,
            trade_side=trade.side.value,
            trade_notional=candidate.notional_value,
        )
        task = asyncio.create_task(self._process(candidate), name=f"enrich-{trade.key}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def wait_idle(self) -> None:
        """Wait for every in-flight candidate to reach an outcome."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, timeout: float) -> None:
        """Stop admitting trades and give in-flight candidates `timeout` seconds to finish.

        Tasks still running after the timeout are cancelled.
        """
        self._closing = True
        if not self._tasks:
            return
        self._logger.info("dispatcher_draining", dispatcher_pending=len(self._tasks))
        _, pending = await asyncio.wait(list(self._tasks), timeout=timeout)
        if pending:
            self._logger.warning(
                "dispatcher_drain_timeout",
                dispatcher_cancelled=len(pending),
                dispatcher_timeout_seconds=timeout,
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    async def _process(self, candidate: CandidateEvent) -> DispatchOutcome:
        trade = candidate.trade
        with bound_contextvars(trade_hash=trade.hash, trade_coin=trade.coin):
            enriched = await self._enrichment.enrich(candidate)
            if enriched is None:
                self._stats.dropped += 1
                return DispatchOutcome.DROPPED
            if self._liquidations_only and not enriched.is_liquidation:
                self._stats.skipped += 1
                self._logger.debug("dispatcher_non_liquidation_skipped")
                return DispatchOutcome.SKIPPED

            message = NotificationMessage(
                event_type="liquidation" if enriched.is_liquidation else "large_trade",
                text=self._formatter.format(enriched, rich_text=True),
                rich_text=True,
                payload={
                    "hash": trade.hash,
                    "coin": trade.coin,
                    "side": trade.side.value,
                    "notional_value": candidate.notional_value,
                },
            )
            try:
                await self._notifications.deliver(message)
            except DeliveryError as e:
                self._stats.delivery_failed += 1
                self._logger.error(
                    "dispatcher_delivery_failed",
                    notification_channel=e.channel,
                    error_message=str(e),
                )
                return DispatchOutcome.DELIVERY_FAILED

            self._stats.notified += 1
            self._logger.info(
                "dispatcher_notified",
                trade_is_liquidation=enriched.is_liquidation,
                trade_notional=candidate.notional_value,
            )
            return DispatchOutcome.NOTIFIED

    def _on_task_done(self, task: asyncio.Task[DispatchOutcome]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error(
                "dispatcher_task_failed",
                error_type=type(error).__name__,
                error_message=str(error),
                exc_info=error,
            )

    def _stats_fields(self) -> dict[str, int]:
        return {f"dispatcher_{k}": v for k, v in vars(self._stats).items()}
