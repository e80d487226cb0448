from hyperliquid_trade_alerts.DI.container import Container

__all__ = ["Container"]
