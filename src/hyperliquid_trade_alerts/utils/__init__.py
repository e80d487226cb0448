# -*- coding: utf-8 -*-
"""Utility modules."""

from hyperliquid_trade_alerts.utils.dedupe import SeenTradeCache
from hyperliquid_trade_alerts.utils.validation import is_hex_address, mask_address

__all__ = ["SeenTradeCache", "is_hex_address", "mask_address"]
