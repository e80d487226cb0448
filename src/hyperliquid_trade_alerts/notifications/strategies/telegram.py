# -*- coding: utf-8 -*-
"""Telegram notification strategy (async)."""

from __future__ import annotations

import asyncio
import time
import structlog
from typing import Any, Callable, Optional, TYPE_CHECKING

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import (
    BadRequest,
    Forbidden,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)
from telegram.request import HTTPXRequest

from hyperliquid_trade_alerts.exceptions import DeliveryError
from hyperliquid_trade_alerts.notifications.types import NotificationMessage
from hyperliquid_trade_alerts.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from hyperliquid_trade_alerts.config.config import Settings


class TelegramNotifier(BaseNotificationStrategy):
    """Send notifications to a Telegram chat using python-telegram-bot.

    Transient Telegram errors are retried with backoff inside one delivery;
    a rejected message or exhausted retries raise DeliveryError.
    """

    name = "telegram"

    def __init__(
        self,
        settings: "Settings",
        *,
        bot: Optional[Bot] = None,
        sleep: Callable[[float], Any] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)

        cfg = self.settings.telegram
        token = cfg.api_key
        chat_id = cfg.chat_id
        if not cfg.enabled or not token or not chat_id:
            raise ValueError("TelegramNotifier requires token and chat_id.")

        self.token: str = str(token)
        self.chat_id: str = str(chat_id)
        self.messages_per_minute = cfg.messages_per_minute
        self.max_retries = cfg.max_retries
        self.backoff_base_seconds = cfg.backoff_base_seconds

        self.connect_timeout = cfg.connect_timeout
        self.read_timeout = cfg.read_timeout
        self.write_timeout = cfg.write_timeout
        self.pool_timeout = cfg.pool_timeout

        self._bot: Optional[Bot] = bot
        self._sleep = sleep
        self._running = False
        self._message_timestamps: list[float] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return

        if self._bot is None:
            request = HTTPXRequest(
                connect_timeout=self.connect_timeout,
                read_timeout=self.read_timeout,
                write_timeout=self.write_timeout,
                pool_timeout=self.pool_timeout,
            )
            self._bot = Bot(token=self.token, request=request)
        await self._bot.initialize()
        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return
        if self._bot is not None:
            await self._bot.shutdown()
        self._bot = None
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running or self._bot is None:
            raise DeliveryError("Telegram notifier is not running", channel=self.name)
        await self._send_message(
            message.text,
            parse_mode=ParseMode.HTML if message.rich_text else None,
        )

    async def _send_message(self, text: str, *, parse_mode: Optional[str]) -> None:
        if self._bot is None:
            raise DeliveryError("Telegram bot is not initialized", channel=self.name)
        await self._apply_rate_limit()
        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            try:
                await self._bot.send_message(
                    chat_id=self.chat_id,
                    text=text,
                    parse_mode=parse_mode,
                )
                self._message_timestamps.append(time.monotonic())
                return
            except RetryAfter as exc:
                last_error = exc
                retry_after = exc.retry_after
                retry_seconds = (
                    retry_after.total_seconds()
                    if hasattr(retry_after, "total_seconds")
                    else float(retry_after)
                )
                self._logger.warning(
                    "telegram_rate_limit_retry_after",
                    retry_seconds=retry_seconds,
                    attempt=attempt,
                )
                await self._sleep(retry_seconds)
            except (BadRequest, Forbidden) as exc:
                self._logger.error(
                    "telegram_fatal_error",
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise DeliveryError(f"Telegram rejected message: {exc}", channel=self.name) from exc
            except (NetworkError, TimedOut, TelegramError) as exc:
                last_error = exc
                backoff = min(60.0, self.backoff_base_seconds * (2 ** (attempt - 1)))
                self._logger.warning(
                    "telegram_error_retry",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    backoff_seconds=backoff,
                )
                if attempt < self.max_retries:
                    await self._sleep(backoff)

        self._logger.error(
            "telegram_max_retries_exceeded",
            error_type=type(last_error).__name__ if last_error else None,
        )
        raise DeliveryError(
            f"Telegram delivery failed after {self.max_retries} attempts",
            channel=self.name,
        ) from last_error

    async def _apply_rate_limit(self) -> None:
        if self.messages_per_minute <= 0:
            return

        now = time.monotonic()
        window_start = now - 60
        self._message_timestamps = [t for t in self._message_timestamps if t >= window_start]
        if len(self._message_timestamps) >= self.messages_per_minute:
            sleep_time = 60 - (now - self._message_timestamps[0])
            if sleep_time > 0:
                self._logger.debug("telegram_rate_limit_wait", wait_seconds=round(sleep_time, 2))
                await self._sleep(sleep_time)
