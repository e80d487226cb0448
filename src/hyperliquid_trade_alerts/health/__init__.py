from hyperliquid_trade_alerts.health.server import HealthServer

__all__ = ["HealthServer"]
