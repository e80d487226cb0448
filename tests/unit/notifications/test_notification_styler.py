# -*- coding: utf-8 -*-
"""Unit tests for notional formatting and trade notification text."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from hyperliquid_trade_alerts.models.trade import (
    AccountContext,
    CandidateEvent,
    EnrichedEvent,
    TradeSide,
)
from hyperliquid_trade_alerts.notifications import TradeNotificationFormatter, format_notional


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1_000_000, "1M"),
        (1_500_000, "1.5M"),
        (12_340_000, "12.3M"),
        (950_000, "950K"),
        (1_260, "1.3K"),
        (999_999, "999K"),
        (1_999_999, "1M"),
    ],
)
def test_format_notional(value: float, expected: str) -> None:
    assert format_notional(value) == expected


def test_liquidation_text(
    candidate_factory: Callable[..., CandidateEvent],
    tx_hash: str,
) -> None:
    event = EnrichedEvent(candidate=candidate_factory(side=TradeSide.SELL), is_liquidation=True)

    text = TradeNotificationFormatter().format(event)

    assert text == (
        "🔴 #BTC Liquidated SHORT: 1.5M at $50000.00 "
        f'<a href="https://app.hyperliquid.xyz/explorer/tx/{tx_hash}">link</a>'
    )


def test_regular_trade_plain_text_has_bare_link(
    candidate_factory: Callable[..., CandidateEvent],
    tx_hash: str,
) -> None:
    event = EnrichedEvent(
        candidate=candidate_factory(coin="ETH", px="3100.256", sz="500"),
        is_liquidation=False,
    )

    text = TradeNotificationFormatter(tx_link_base="https://explorer.test/tx/").format(
        event, rich_text=False
    )

    assert text == f"🟢 Long #ETH - $1.6M at $3100.26 https://explorer.test/tx/{tx_hash}"


def test_account_value_is_appended_when_known(
    candidate_factory: Callable[..., CandidateEvent],
) -> None:
    event = EnrichedEvent(
        candidate=candidate_factory(),
        is_liquidation=True,
        context=AccountContext(account_value=2_400_000),
    )

    text = TradeNotificationFormatter().format(event, rich_text=False)

    assert "Liquidated LONG: 1.5M at $50000.00 (acct $2.4M) https://" in text
