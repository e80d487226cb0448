"""Hyperliquid websocket frames: outbound builders and inbound parsing.

Inbound frames handled:
    {"channel": "trades", "data": [{coin, side, px, sz, hash, time, tid, users}, ...]}
    {"ping": true}
Any other channel (e.g. subscriptionResponse) is ignored. Anything else is a
FeedProtocolError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, cast

from hyperliquid_trade_alerts.exceptions import FeedProtocolError
from hyperliquid_trade_alerts.models.trade import RawTradeEvent, TradeSide

TRADES_CHANNEL = "trades"


def subscribe_frame(coin: str) -> str:
    """Serialized subscribe request for one coin's trades."""
    return json.dumps(
        {"method": "subscribe", "subscription": {"type": TRADES_CHANNEL, "coin": coin}}
    )


def pong_frame() -> str:
    return json.dumps({"pong": True})


@dataclass(frozen=True, slots=True)
class PingFrame:
    pass


@dataclass(frozen=True, slots=True)
class TradesFrame:
    trades: list[RawTradeEvent]
    rejected: list[dict[str, Any]] = field(default_factory=list)
    """Entries dropped because a required field was missing or invalid."""


@dataclass(frozen=True, slots=True)
class IgnoredFrame:
    channel: str


FeedFrame = PingFrame | TradesFrame | IgnoredFrame


def parse_frame(raw: str | bytes) -> FeedFrame:
    """Decode one inbound websocket frame.

    Raises:
        FeedProtocolError: If the payload is not JSON or has no recognizable shape.
    """
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    try:
        message = json.loads(text)
    except ValueError as e:
        raise FeedProtocolError(f"Invalid JSON frame: {e}", raw=text) from e
    if not isinstance(message, dict):
        raise FeedProtocolError("Frame is not a JSON object", raw=text)
    msg = cast(dict[str, Any], message)

    channel = msg.get("channel")
    if channel == TRADES_CHANNEL:
        data = msg.get("data")
        if not isinstance(data, list):
            raise FeedProtocolError("trades frame without a data list", raw=text)
        trades: list[RawTradeEvent] = []
        rejected: list[dict[str, Any]] = []
        for item in cast(list[Any], data):
            trade = parse_trade(item) if isinstance(item, dict) else None
            if trade is None:
                rejected.append(item if isinstance(item, dict) else {"value": item})
            else:
                trades.append(trade)
        return TradesFrame(trades=trades, rejected=rejected)
    if isinstance(channel, str) and channel:
        return IgnoredFrame(channel=channel)
    if msg.get("ping"):
        return PingFrame()
    raise FeedProtocolError("Unexpected frame format", raw=text)


def parse_trade(item: dict[str, Any]) -> RawTradeEvent | None:
    """Build a RawTradeEvent from one `data` entry, or None if it is unusable.

    px/sz are kept as strings; numeric validation belongs to EventFilter.
    """
    coin = item.get("coin")
    px = item.get("px")
    sz = item.get("sz")
    tx_hash = item.get("hash")
    if not isinstance(coin, str) or not coin:
        return None
    if not isinstance(tx_hash, str) or not tx_hash:
        return None
    if px is None or sz is None:
        return None
    try:
        side = TradeSide(item.get("side"))
    except ValueError:
        return None

    raw_time = item.get("time")
    try:
        ts = int(raw_time) if raw_time is not None else 0
    except (TypeError, ValueError):
        ts = 0
    raw_tid = item.get("tid")
    try:
        tid = int(raw_tid) if raw_tid is not None else None
    except (TypeError, ValueError):
        tid = None
    raw_users = item.get("users")
    users: tuple[str, str] | None = None
    if isinstance(raw_users, list) and len(cast(list[Any], raw_users)) == 2:
        buyer, seller = cast(list[Any], raw_users)
        users = (str(buyer), str(seller))

    return RawTradeEvent(
        coin=coin,
        side=side,
        px=str(px),
        sz=str(sz),
        hash=tx_hash,
        time=ts,
        tid=tid,
        users=users,
    )
