"""Notional-value significance filter (pure, no I/O)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from hyperliquid_trade_alerts.models.trade import CandidateEvent, RawTradeEvent


def _parse_decimal(value: str) -> Decimal | None:
    try:
        number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


class EventFilter:
    """Accepts a trade iff price * size is strictly greater than the threshold."""

    def __init__(self, min_notional_value: float) -> None:
        self._threshold = Decimal(str(min_notional_value))

    @property
    def min_notional_value(self) -> float:
        return float(self._threshold)

    def filter(self, raw: RawTradeEvent) -> CandidateEvent | None:
        """Return a CandidateEvent for significant trades, None otherwise.

        Unparseable, non-finite or non-positive px/sz reject the trade.
        """
        price = _parse_decimal(raw.px)
        size = _parse_decimal(raw.sz)
        if price is None or size is None:
            return None
        if price <= 0 or size <= 0:
            return None
        notional = price * size
        if not notional > self._threshold:
            return None
        return CandidateEvent(
            trade=raw,
            price=float(price),
            size=float(size),
            notional_value=float(notional),
        )
