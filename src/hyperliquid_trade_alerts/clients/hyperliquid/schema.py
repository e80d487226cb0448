"""Response shapes of the Hyperliquid explorer and info endpoints.

The explorer payload is not formally documented; every field is optional.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict


class TxActionSchema(TypedDict, total=False):
    type: str
    user: str
    isCross: bool
    asset: int
    isBuy: bool
    liquidatedUser: str


class TxSchema(TypedDict, total=False):
    action: TxActionSchema
    block: int
    error: str | None
    hash: str
    time: int
    user: str
    fills: list[dict[str, Any]]


class TxDetailsSchema(TypedDict):
    type: NotRequired[str]
    tx: NotRequired[TxSchema]


class MarginSummarySchema(TypedDict, total=False):
    accountValue: str
    totalNtlPos: str
    totalRawUsd: str
    totalMarginUsed: str


class PositionSchema(TypedDict, total=False):
    coin: str
    szi: str
    entryPx: str | None
    positionValue: str
    liquidationPx: str | None


class AssetPositionSchema(TypedDict, total=False):
    position: PositionSchema
    type: str


class ClearinghouseStateSchema(TypedDict, total=False):
    marginSummary: MarginSummarySchema
    crossMarginSummary: MarginSummarySchema
    assetPositions: list[AssetPositionSchema]
    withdrawable: str
    time: int
