# -*- coding: utf-8 -*-
"""Unit tests for EventFilter."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from hyperliquid_trade_alerts.models.trade import RawTradeEvent
from hyperliquid_trade_alerts.services.filtering import EventFilter


def test_trade_above_threshold_becomes_candidate(
    trade_factory: Callable[..., RawTradeEvent],
) -> None:
    trade = trade_factory(px="50000", sz="30")

    candidate = EventFilter(min_notional_value=1_000_000).filter(trade)

    assert candidate is not None
    assert candidate.trade is trade
    assert candidate.price == 50_000.0
    assert candidate.size == 30.0
    assert candidate.notional_value == 1_500_000.0


def test_trade_below_threshold_is_rejected(
    trade_factory: Callable[..., RawTradeEvent],
) -> None:
    assert EventFilter(min_notional_value=1_000_000).filter(trade_factory(sz="10")) is None


def test_notional_equal_to_threshold_is_rejected(
    trade_factory: Callable[..., RawTradeEvent],
) -> None:
    trade = trade_factory(px="50000", sz="20")

    assert EventFilter(min_notional_value=1_000_000).filter(trade) is None


def test_comparison_is_exact_for_decimal_inputs(
    trade_factory: Callable[..., RawTradeEvent],
) -> None:
    # 0.1 * 0.3 is 0.030000000000000002 in binary floating point.
    trade = trade_factory(px="0.1", sz="0.3")

    assert EventFilter(min_notional_value=0.03).filter(trade) is None


@pytest.mark.parametrize(
    ("px", "sz"),
    [
        ("abc", "1"),
        ("1", ""),
        ("NaN", "10"),
        ("Infinity", "10"),
        ("-50000", "-30"),
        ("-50000", "30"),
        ("0", "30"),
    ],
)
def test_unparseable_or_non_positive_values_are_rejected(
    trade_factory: Callable[..., RawTradeEvent],
    px: str,
    sz: str,
) -> None:
    assert EventFilter(min_notional_value=0).filter(trade_factory(px=px, sz=sz)) is None


def test_min_notional_value_is_exposed() -> None:
    assert EventFilter(min_notional_value=250_000).min_notional_value == 250_000.0
