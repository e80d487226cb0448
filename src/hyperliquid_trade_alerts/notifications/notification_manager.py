"""Notification service: fan-out of one message to every configured channel."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from hyperliquid_trade_alerts.exceptions import DeliveryError
from hyperliquid_trade_alerts.notifications.strategies import BaseNotificationStrategy
from hyperliquid_trade_alerts.notifications.types import NotificationMessage


@dataclass
class NotificationService:
    """Deliver notifications to all configured channels.

    Every channel is attempted even if an earlier one fails; any failure is
    reported as a single DeliveryError after the fan-out.
    """

    notifiers: list[BaseNotificationStrategy]
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _logger: Any = field(init=False)
    _initialized: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Initialize all notifiers."""
        self._logger.debug(
            "notification_init_started",
            notification_notifiers_count=len(self.notifiers),
        )
        for notifier in self.notifiers:
            await notifier.initialize()
        if not self.notifiers:
            self._logger.info("notification_init_no_notifiers")
        self._initialized = True
        self._logger.debug("notification_init_complete")

    async def shutdown(self) -> None:
        """Shutdown all notifiers."""
        self._logger.debug("notification_shutdown_started")
        for notifier in self.notifiers:
            await notifier.shutdown()
        self._initialized = False
        self._logger.debug("notification_shutdown_complete")

    async def deliver(self, message: NotificationMessage) -> None:
        """Send a message through every notifier.

        Raises:
            DeliveryError: If the service is not initialized or any channel failed.
        """
        if not self._initialized:
            raise DeliveryError("NotificationService not initialized")
        self._logger.debug(
            "notification_dispatch",
            notification_event_type=message.event_type,
            notification_notifiers_count=len(self.notifiers),
        )
        failed: list[str] = []
        last_error: DeliveryError | None = None
        for notifier in self.notifiers:
            try:
                await notifier.send_notification(message)
            except DeliveryError as e:
                failed.append(notifier.name)
                last_error = e
                self._logger.warning(
                    "notification_channel_failed",
                    notification_channel=notifier.name,
                    notification_event_type=message.event_type,
                    error_message=str(e),
                )
        if failed:
            raise DeliveryError(
                f"Delivery failed on: {', '.join(failed)}",
                channel=",".join(failed),
            ) from last_error
