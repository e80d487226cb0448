# -*- coding: utf-8 -*-
"""Unit tests for TelegramNotifier."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
from telegram.constants import ParseMode
from telegram.error import BadRequest, NetworkError, RetryAfter, TimedOut

from hyperliquid_trade_alerts.exceptions import DeliveryError
from hyperliquid_trade_alerts.notifications import NotificationMessage, TelegramNotifier


def _settings(**overrides: Any) -> Any:
    telegram = {
        "enabled": True,
        "api_key": "123456:test-token",
        "chat_id": "-10042",
        "messages_per_minute": 30,
        "max_retries": 3,
        "backoff_base_seconds": 1.0,
        "connect_timeout": 10.0,
        "read_timeout": 20.0,
        "write_timeout": 20.0,
        "pool_timeout": 10.0,
    }
    telegram.update(overrides)
    return SimpleNamespace(telegram=SimpleNamespace(**telegram))


async def _notifier(
    bot: Any,
    recorded_sleep: tuple[list[float], Any],
    **overrides: Any,
) -> TelegramNotifier:
    _, sleep = recorded_sleep
    notifier = TelegramNotifier(_settings(**overrides), bot=bot, sleep=sleep)
    await notifier.initialize()
    return notifier


def _message(rich_text: bool = True) -> NotificationMessage:
    return NotificationMessage(event_type="liquidation", text="hello", rich_text=rich_text)


def test_requires_token_and_chat_id() -> None:
    with pytest.raises(ValueError):
        TelegramNotifier(_settings(chat_id=None), bot=AsyncMock())


async def test_sends_rich_text_as_html(recorded_sleep: tuple[list[float], Any]) -> None:
    bot = AsyncMock()
    notifier = await _notifier(bot, recorded_sleep)

    await notifier.send_notification(_message())

    bot.initialize.assert_awaited_once()
    bot.send_message.assert_awaited_once_with(
        chat_id="-10042",
        text="hello",
        parse_mode=ParseMode.HTML,
    )


async def test_plain_text_has_no_parse_mode(recorded_sleep: tuple[list[float], Any]) -> None:
    bot = AsyncMock()
    notifier = await _notifier(bot, recorded_sleep)

    await notifier.send_notification(_message(rich_text=False))

    assert bot.send_message.await_args.kwargs["parse_mode"] is None


async def test_transient_error_is_retried_with_backoff(
    recorded_sleep: tuple[list[float], Any],
) -> None:
    delays, _ = recorded_sleep
    bot = AsyncMock()
    bot.send_message.side_effect = [NetworkError("reset"), TimedOut(), None]
    notifier = await _notifier(bot, recorded_sleep)

    await notifier.send_notification(_message())

    assert bot.send_message.await_count == 3
    assert delays == [1.0, 2.0]


async def test_retry_after_waits_requested_time(
    recorded_sleep: tuple[list[float], Any],
) -> None:
    delays, _ = recorded_sleep
    bot = AsyncMock()
    bot.send_message.side_effect = [RetryAfter(5), None]
    notifier = await _notifier(bot, recorded_sleep)

    await notifier.send_notification(_message())

    assert delays == [5.0]


async def test_rejected_message_is_not_retried(
    recorded_sleep: tuple[list[float], Any],
) -> None:
    bot = AsyncMock()
    bot.send_message.side_effect = BadRequest("can't parse entities")
    notifier = await _notifier(bot, recorded_sleep)

    with pytest.raises(DeliveryError) as exc_info:
        await notifier.send_notification(_message())

    assert exc_info.value.channel == "telegram"
    assert bot.send_message.await_count == 1


async def test_exhausted_retries_raise_delivery_error(
    recorded_sleep: tuple[list[float], Any],
) -> None:
    delays, _ = recorded_sleep
    bot = AsyncMock()
    bot.send_message.side_effect = NetworkError("down")
    notifier = await _notifier(bot, recorded_sleep)

    with pytest.raises(DeliveryError):
        await notifier.send_notification(_message())

    assert bot.send_message.await_count == 3
    assert delays == [1.0, 2.0]


async def test_send_before_initialize_raises() -> None:
    notifier = TelegramNotifier(_settings(), bot=AsyncMock())

    with pytest.raises(DeliveryError):
        await notifier.send_notification(_message())


async def test_shutdown_closes_bot(recorded_sleep: tuple[list[float], Any]) -> None:
    bot = AsyncMock()
    notifier = await _notifier(bot, recorded_sleep)

    await notifier.shutdown()

    bot.shutdown.assert_awaited_once()
    assert notifier.is_running is False


async def test_send_without_bot_raises_delivery_error(
    recorded_sleep: tuple[list[float], Any],
) -> None:
    notifier = await _notifier(AsyncMock(), recorded_sleep)
    await notifier.shutdown()

    with pytest.raises(DeliveryError) as exc_info:
        await notifier._send_message("hello", parse_mode=None)

    assert exc_info.value.channel == notifier.name
