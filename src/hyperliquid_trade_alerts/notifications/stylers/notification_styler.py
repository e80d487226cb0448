# -*- coding: utf-8 -*-
"""Trade notification text (Telegram-style, HTML links)."""

from __future__ import annotations

import math

from hyperliquid_trade_alerts.models.trade import EnrichedEvent, TradeSide
from hyperliquid_trade_alerts.notifications.types import TradeFormatter

DEFAULT_TX_LINK_BASE = "https://app.hyperliquid.xyz/explorer/tx/"

_GLYPHS = {TradeSide.BUY: "🟢", TradeSide.SELL: "🔴"}


def format_notional(value: float) -> str:
    """Scale to K (< 1M) or M (>= 1M) with one decimal.

    When the one-decimal text ends in .0 the scaled value is floored instead:
    1_000_000 -> "1M", 1_500_000 -> "1.5M", 950_000 -> "950K",
    999_999 -> "999K", 1_999_999 -> "1M".
    """
    if value >= 1_000_000:
        scaled, suffix = value / 1_000_000, "M"
    else:
        scaled, suffix = value / 1_000, "K"
    text = f"{scaled:.1f}"
    if text.endswith(".0"):
        text = str(math.floor(scaled))
    return f"{text}{suffix}"


class TradeNotificationFormatter(TradeFormatter):
    """Render an EnrichedEvent into one line of notification text.

    Liquidations:  "🟢 #BTC Liquidated LONG: 1.5M at $50000.00 <link>"
    Other trades:  "🔴 Short #ETH - $2.3M at $3100.25 <link>"

    Deterministic and locale-independent.
    """

    def __init__(self, tx_link_base: str = DEFAULT_TX_LINK_BASE) -> None:
        self._tx_link_base = tx_link_base

    def tx_link(self, tx_hash: str) -> str:
        return f"{self._tx_link_base}{tx_hash}"

    def format(self, event: EnrichedEvent, *, rich_text: bool = True) -> str:
        trade = event.trade
        glyph = _GLYPHS[trade.side]
        side = trade.side.display
        notional = format_notional(event.candidate.notional_value)
        price = f"{event.candidate.price:.2f}"

        if event.is_liquidation:
            text = f"{glyph} #{trade.coin} Liquidated {side.upper()}: {notional} at ${price}"
        else:
            text = f"{glyph} {side} #{trade.coin} - ${notional} at ${price}"

        context = event.context
        if context is not None and context.account_value is not None:
            text += f" (acct ${format_notional(context.account_value)})"

        link = self.tx_link(trade.hash)
        if rich_text:
            return f'{text} <a href="{link}">link</a>'
        return f"{text} {link}"
