# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from hyperliquid_trade_alerts.notifications.types import NotificationMessage
from hyperliquid_trade_alerts.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:  # pragma: no cover
    from hyperliquid_trade_alerts.config import Settings

_LINK_RE = re.compile(r'<a href="([^"]*)">[^<]*</a>')


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout. Links are shown as bare URLs."""

    name = "console"

    def __init__(self, settings: "Settings") -> None:
        super().__init__(settings)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        """Send a notification to the console."""
        if not self.is_running or not self.settings.console.enabled:
            return
        body = _LINK_RE.sub(r"\1", message.text) if message.rich_text else message.text
        print(body)
