# -*- coding: utf-8 -*-
"""Unit tests for feed frame parsing."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from hyperliquid_trade_alerts.exceptions import FeedProtocolError
from hyperliquid_trade_alerts.feed.protocol import (
    IgnoredFrame,
    PingFrame,
    TradesFrame,
    parse_frame,
    pong_frame,
    subscribe_frame,
)
from hyperliquid_trade_alerts.models.trade import TradeSide


def test_subscribe_frame_targets_trades_channel_for_coin() -> None:
    assert json.loads(subscribe_frame("ETH")) == {
        "method": "subscribe",
        "subscription": {"type": "trades", "coin": "ETH"},
    }


def test_pong_frame() -> None:
    assert json.loads(pong_frame()) == {"pong": True}


def test_parse_ping() -> None:
    assert isinstance(parse_frame('{"ping": true}'), PingFrame)


def test_parse_trades_frame_builds_events(trade_item: Callable[..., dict[str, Any]]) -> None:
    raw = json.dumps(
        {"channel": "trades", "data": [trade_item(), trade_item(side="A", tid=8, coin="ETH")]}
    )

    frame = parse_frame(raw.encode("utf-8"))

    assert isinstance(frame, TradesFrame)
    assert frame.rejected == []
    first, second = frame.trades
    assert first.coin == "BTC"
    assert first.side is TradeSide.BUY
    assert first.px == "50000"
    assert first.tid == 7
    assert first.users == ("0x" + "11" * 20, "0x" + "22" * 20)
    assert second.side is TradeSide.SELL
    assert second.coin == "ETH"


def test_parse_trades_frame_rejects_unusable_entries(
    trade_item: Callable[..., dict[str, Any]],
) -> None:
    bad_side = trade_item(side="X")
    no_hash = trade_item(hash="")
    raw = json.dumps({"channel": "trades", "data": [bad_side, trade_item(), no_hash, 5]})

    frame = parse_frame(raw)

    assert isinstance(frame, TradesFrame)
    assert len(frame.trades) == 1
    assert len(frame.rejected) == 3


def test_parse_trade_tolerates_missing_optional_fields(
    trade_item: Callable[..., dict[str, Any]],
) -> None:
    item = trade_item()
    del item["tid"]
    del item["users"]
    item["time"] = "not-a-number"

    frame = parse_frame(json.dumps({"channel": "trades", "data": [item]}))

    assert isinstance(frame, TradesFrame)
    trade = frame.trades[0]
    assert trade.tid is None
    assert trade.users is None
    assert trade.time == 0
    assert trade.key == trade.hash


def test_other_channels_are_ignored() -> None:
    frame = parse_frame('{"channel": "subscriptionResponse", "data": {}}')

    assert frame == IgnoredFrame(channel="subscriptionResponse")


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2, 3]",
        '{"foo": "bar"}',
        '{"channel": "trades", "data": {"coin": "BTC"}}',
    ],
)
def test_malformed_frames_raise_protocol_error(raw: str) -> None:
    with pytest.raises(FeedProtocolError) as exc_info:
        parse_frame(raw)

    assert exc_info.value.raw == raw
