from hyperliquid_trade_alerts.services.dispatching.dispatcher import (
    DispatchOutcome,
    Dispatcher,
    DispatchStats,
)

__all__ = ["DispatchOutcome", "DispatchStats", "Dispatcher"]
