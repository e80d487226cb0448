# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from hyperliquid_trade_alerts.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from hyperliquid_trade_alerts.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract base class for notification channels."""

    name: str = "base"

    def __init__(self, settings: "Settings"):
        """
        Initialize the strategy.

        Args:
            settings: Global configuration (Settings).
        """
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is ready to send."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        pass

    @abstractmethod
    async def send_notification(
        self,
        message: NotificationMessage,
    ) -> None:
        """
        Deliver a notification.

        Args:
            message: Message to send (NotificationMessage)

        Raises:
            DeliveryError: If the message could not be delivered.
        """
        pass
