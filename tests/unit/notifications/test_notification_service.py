# -*- coding: utf-8 -*-
"""Unit tests for NotificationService and ConsoleNotifier."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from hyperliquid_trade_alerts.exceptions import DeliveryError
from hyperliquid_trade_alerts.notifications import (
    ConsoleNotifier,
    NotificationMessage,
    NotificationService,
)


def _notifier(name: str, *, error: Exception | None = None) -> Any:
    notifier = Mock(
        initialize=AsyncMock(),
        shutdown=AsyncMock(),
        send_notification=AsyncMock(side_effect=error),
    )
    notifier.name = name
    return notifier


def _message() -> NotificationMessage:
    return NotificationMessage(event_type="system_started", text="up")


async def test_deliver_sends_to_every_notifier() -> None:
    first, second = _notifier("a"), _notifier("b")
    service = NotificationService(notifiers=[first, second])
    await service.initialize()

    await service.deliver(_message())

    first.send_notification.assert_awaited_once_with(_message())
    second.send_notification.assert_awaited_once_with(_message())


async def test_one_failing_channel_does_not_block_others() -> None:
    failing = _notifier("telegram", error=DeliveryError("nope", channel="telegram"))
    healthy = _notifier("console")
    service = NotificationService(notifiers=[failing, healthy])
    await service.initialize()

    with pytest.raises(DeliveryError) as exc_info:
        await service.deliver(_message())

    healthy.send_notification.assert_awaited_once()
    assert exc_info.value.channel == "telegram"


async def test_deliver_requires_initialize() -> None:
    service = NotificationService(notifiers=[_notifier("a")])

    with pytest.raises(DeliveryError):
        await service.deliver(_message())


async def test_shutdown_closes_notifiers() -> None:
    notifier = _notifier("a")
    service = NotificationService(notifiers=[notifier])
    await service.initialize()

    await service.shutdown()

    notifier.shutdown.assert_awaited_once()
    assert service.is_initialized is False


async def test_console_prints_links_as_urls(capsys: pytest.CaptureFixture[str]) -> None:
    notifier = ConsoleNotifier(SimpleNamespace(console=SimpleNamespace(enabled=True)))  # type: ignore[arg-type]
    await notifier.initialize()

    await notifier.send_notification(
        NotificationMessage(
            event_type="liquidation",
            text='🟢 #BTC Liquidated LONG: 1.5M at $50000.00 <a href="https://x.test/tx/1">link</a>',
            rich_text=True,
        )
    )

    assert capsys.readouterr().out.strip() == (
        "🟢 #BTC Liquidated LONG: 1.5M at $50000.00 https://x.test/tx/1"
    )
