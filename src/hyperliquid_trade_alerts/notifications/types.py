"""Notification message types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from hyperliquid_trade_alerts.models.trade import EnrichedEvent


@dataclass(frozen=True)
class NotificationMessage:
    """Message to be sent via one or more notification channels."""

    event_type: str
    text: str
    rich_text: bool = False
    """If True, text uses the minimal HTML link markup (<a href="...">...</a>)."""
    payload: dict[str, Any] | None = None


class TradeFormatter(Protocol):
    """Render an enriched trade into display text."""

    def format(self, event: "EnrichedEvent", *, rich_text: bool = True) -> str:
        ...
