"""Deduplication of trades replayed by the feed."""

from __future__ import annotations

import time
from typing import Callable

from cachetools import TTLCache

from hyperliquid_trade_alerts.models.trade import RawTradeEvent


class SeenTradeCache:
    """Remembers trade keys for a while so replays after a resubscribe are ignored.

    Hyperliquid sends a batch of recent trades on every subscribe; after a
    reconnect those would otherwise be enriched and notified twice. Uses
    cachetools.TTLCache so memory stays bounded.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 900.0,
        maxsize: int = 50_000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TTLCache[str, bool] = TTLCache(
            maxsize=max(1, maxsize), ttl=ttl_seconds, timer=timer
        )

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: str) -> bool:
        return key in self._cache

    def check_and_add(self, trade: RawTradeEvent) -> bool:
        """Record the trade; return True if it was not seen before."""
        key = trade.key
        if key in self._cache:
            return False
        self._cache[key] = True
        return True
