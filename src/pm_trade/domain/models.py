"""Domain models for pm_trade: pure dataclasses.

Trades are append-only: never edited or deleted.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Trade:
    id: str
    user_id: str
    market_id: str
    side: str                 # TradeSide value
    shares: int               # > 0
    price_per_share: int      # cents, market price for `side` at execution
    created_at: datetime | None = None

    @property
    def total_cost(self) -> int:
        return self.shares * self.price_per_share


@dataclass
class TradeMarketSummary:
    """The subset of market columns shown next to a trade."""

    id: str
    title: str
    status: str
    outcome: str | None
    yes_price: int
    no_price: int


@dataclass
class TradeWithMarket:
    trade: Trade
    market: TradeMarketSummary | None
