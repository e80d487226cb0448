# -*- coding: utf-8 -*-
"""Unit tests for trade models."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from hyperliquid_trade_alerts.models.trade import RawTradeEvent, TradeSide


def test_empty_hash_is_rejected(trade_factory: Callable[..., RawTradeEvent]) -> None:
    with pytest.raises(ValueError):
        trade_factory(hash="")


def test_side_display() -> None:
    assert TradeSide("B").display == "Long"
    assert TradeSide("A").display == "Short"


def test_to_dict_uses_wire_side(trade_factory: Callable[..., RawTradeEvent]) -> None:
    data = trade_factory(side=TradeSide.SELL).to_dict()

    assert data["side"] == "A"
    assert data["px"] == "50000"
    assert data["tid"] == 1


def test_trade_is_immutable(trade_factory: Callable[..., RawTradeEvent]) -> None:
    trade = trade_factory()

    with pytest.raises(AttributeError):
        trade.px = "1"  # type: ignore[misc]
