# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from types import SimpleNamespace
from typing import Any

import aiohttp
import pytest

from hyperliquid_trade_alerts.models.trade import CandidateEvent, RawTradeEvent, TradeSide


class FakeWebSocket:
    """Scripted websocket double for FeedConnection.

    Yields the given frames (dicts are JSON-encoded, strings sent as-is,
    SimpleNamespace passed through as raw messages). When the script runs out
    the server "closes" the socket, unless hold_open is set, in which case the
    iterator blocks until close() is called.
    """

    def __init__(self, frames: list[Any] | None = None, *, hold_open: bool = False) -> None:
        self.frames = list(frames or [])
        self.sent: list[str] = []
        self.closed = False
        self._hold_open = hold_open
        self._closed_event = asyncio.Event()

    async def send_str(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> bool:
        self.closed = True
        self._closed_event.set()
        return True

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Any]:
        for frame in self.frames:
            if isinstance(frame, SimpleNamespace):
                yield frame
            else:
                data = frame if isinstance(frame, str) else json.dumps(frame)
                yield SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=data)
        if self._hold_open:
            await self._closed_event.wait()


@pytest.fixture
def fake_websocket() -> type[FakeWebSocket]:
    return FakeWebSocket


@pytest.fixture
def recorded_sleep() -> tuple[list[float], Callable[[float], Any]]:
    """Sleep double that records requested delays and yields to the loop."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)
        await asyncio.sleep(0)

    return delays, _sleep


@pytest.fixture
def tx_hash() -> str:
    return "0x" + "ab" * 32


@pytest.fixture
def liquidated_user() -> str:
    return "0x2d27b6e21b3d4d7c9a43fdf58f12345678907706"


@pytest.fixture
def trade_factory(tx_hash: str) -> Callable[..., RawTradeEvent]:
    """Build RawTradeEvent with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> RawTradeEvent:
        return RawTradeEvent(
            coin=overrides.pop("coin", "BTC"),
            side=overrides.pop("side", TradeSide.BUY),
            px=overrides.pop("px", "50000"),
            sz=overrides.pop("sz", "30"),
            hash=overrides.pop("hash", tx_hash),
            time=overrides.pop("time", 1_700_000_000_000),
            tid=overrides.pop("tid", 1),
            users=overrides.pop("users", None),
        )

    return _build


@pytest.fixture
def trade_item() -> Callable[..., dict[str, Any]]:
    """Build one wire-format entry of a trades frame."""

    def _build(**overrides: Any) -> dict[str, Any]:
        item: dict[str, Any] = {
            "coin": "BTC",
            "side": "B",
            "px": "50000",
            "sz": "30",
            "hash": "0x" + "cd" * 32,
            "time": 1_700_000_000_000,
            "tid": 7,
            "users": ["0x" + "11" * 20, "0x" + "22" * 20],
        }
        item.update(overrides)
        return item

    return _build


@pytest.fixture
def candidate_factory(
    trade_factory: Callable[..., RawTradeEvent],
) -> Callable[..., CandidateEvent]:
    def _build(**overrides: Any) -> CandidateEvent:
        trade = overrides.pop("trade", None) or trade_factory(**overrides)
        price = float(trade.px)
        size = float(trade.sz)
        return CandidateEvent(trade=trade, price=price, size=size, notional_value=price * size)

    return _build


@pytest.fixture
def liquidation_tx(liquidated_user: str) -> dict[str, Any]:
    """txDetails payload of a liquidate action."""
    return {
        "type": "txDetails",
        "tx": {
            "action": {
                "type": "liquidate",
                "user": "0x" + "33" * 20,
                "liquidatedUser": liquidated_user,
            },
            "user": "0x" + "33" * 20,
            "hash": "0x" + "ab" * 32,
        },
    }


@pytest.fixture
def order_tx() -> dict[str, Any]:
    """txDetails payload of a regular order."""
    return {
        "type": "txDetails",
        "tx": {
            "action": {"type": "order", "orders": []},
            "user": "0x" + "44" * 20,
            "hash": "0x" + "ab" * 32,
        },
    }
