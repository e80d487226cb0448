"""Trade events as they move through the pipeline.

RawTradeEvent (feed) -> CandidateEvent (passed the notional filter) ->
EnrichedEvent (tx details fetched and classified).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class TradeSide(str, Enum):
    """Aggressor side using Hyperliquid wire codes."""

    BUY = "B"
    SELL = "A"

    @property
    def display(self) -> str:
        """Position direction shown to users (buy -> Long, sell -> Short)."""
        return "Long" if self is TradeSide.BUY else "Short"


@dataclass(frozen=True, slots=True)
class RawTradeEvent:
    """One trade from the `trades` channel. Immutable once parsed."""

    coin: str
    side: TradeSide
    px: str
    """Price as sent by the venue (decimal string)."""
    sz: str
    """Size as sent by the venue (decimal string)."""
    hash: str
    """Transaction hash; never empty."""
    time: int
    """Venue timestamp in milliseconds."""
    tid: int | None = None
    users: tuple[str, str] | None = None
    """(buyer, seller) addresses when the venue includes them."""

    def __post_init__(self) -> None:
        if not self.hash:
            raise ValueError("trade hash must be non-empty")

    @property
    def key(self) -> str:
        """Dedupe/log key. One transaction can carry several fills, so tid is appended."""
        if self.tid is None:
            return self.hash
        return f"{self.hash}:{self.tid}"

    def to_dict(self) -> dict[str, Any]:
        """Snake_case dict with the side as its wire code."""
        data = asdict(self)
        data["side"] = self.side.value
        return data


@dataclass(frozen=True, slots=True)
class CandidateEvent:
    """A trade that passed the notional filter.

    notional_value is computed once by EventFilter and never recomputed.
    """

    trade: RawTradeEvent
    price: float
    size: float
    notional_value: float


@dataclass(frozen=True, slots=True)
class LiquidationDetails:
    """Addresses named by a liquidate action, when present."""

    liquidated_user: str | None = None
    liquidator: str | None = None


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of inspecting a txDetails response."""

    is_liquidation: bool
    liquidation: LiquidationDetails | None = None


@dataclass(frozen=True, slots=True)
class AccountContext:
    """Snapshot of the liquidated account (clearinghouseState)."""

    account_value: float | None = None
    margin_used: float | None = None
    position_size: float | None = None
    entry_price: float | None = None


@dataclass(frozen=True, slots=True)
class EnrichedEvent:
    """Candidate plus lookup result.

    context is None when no account snapshot was requested or it could not be fetched.
    """

    candidate: CandidateEvent
    is_liquidation: bool
    liquidation: LiquidationDetails | None = None
    context: AccountContext | None = None

    @property
    def trade(self) -> RawTradeEvent:
        return self.candidate.trade
