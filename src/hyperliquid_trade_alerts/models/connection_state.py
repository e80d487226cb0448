"""Feed connection lifecycle states."""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    """States of FeedConnection. Owned by the connection, never shared."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    SUBSCRIBING = "subscribing"
    STREAMING = "streaming"
    CLOSING = "closing"
