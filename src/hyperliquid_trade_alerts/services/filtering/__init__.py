from hyperliquid_trade_alerts.services.filtering.event_filter import EventFilter

__all__ = ["EventFilter"]
