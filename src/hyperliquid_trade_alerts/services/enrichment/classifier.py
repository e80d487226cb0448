"""Liquidation detection from txDetails.

The explorer payload is undocumented and has changed shape before, so all
knowledge of it lives here. Missing or unexpected fields mean "not a
liquidation"; nothing in this module raises on input shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from hyperliquid_trade_alerts.models.trade import Classification, LiquidationDetails

LIQUIDATION_ACTION_TYPES = frozenset({"liquidate"})


class LiquidationClassifier:
    """Decides whether a transaction was a forced liquidation."""

    def __init__(self, action_types: frozenset[str] = LIQUIDATION_ACTION_TYPES) -> None:
        self._action_types = action_types

    def classify(self, tx_details: Any) -> Classification:
        tx = _mapping(tx_details).get("tx")
        tx_map = _mapping(tx)
        action = _mapping(tx_map.get("action"))

        action_type = action.get("type")
        if isinstance(action_type, str) and action_type in self._action_types:
            return Classification(
                is_liquidation=True,
                liquidation=LiquidationDetails(
                    liquidated_user=_str_or_none(action.get("liquidatedUser")),
                    liquidator=_str_or_none(action.get("user") or tx_map.get("user")),
                ),
            )

        # Older payloads flagged liquidations on individual fills instead.
        fills = tx_map.get("fills")
        if isinstance(fills, list):
            for fill in cast(list[Any], fills):
                liquidation = _mapping(fill).get("liquidation")
                if liquidation:
                    liq = _mapping(liquidation)
                    return Classification(
                        is_liquidation=True,
                        liquidation=LiquidationDetails(
                            liquidated_user=_str_or_none(liq.get("liquidatedUser")),
                        ),
                    )

        return Classification(is_liquidation=False)


def _mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return cast(Mapping[str, Any], value)
    return {}


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None
