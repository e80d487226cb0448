"""Hyperliquid websocket trade feed."""

from hyperliquid_trade_alerts.feed.connection import FeedConnection, WebSocketLike
from hyperliquid_trade_alerts.feed.protocol import (
    FeedFrame,
    IgnoredFrame,
    PingFrame,
    TradesFrame,
    parse_frame,
    pong_frame,
    subscribe_frame,
)

__all__ = [
    "FeedConnection",
    "FeedFrame",
    "IgnoredFrame",
    "PingFrame",
    "TradesFrame",
    "WebSocketLike",
    "parse_frame",
    "pong_frame",
    "subscribe_frame",
]
