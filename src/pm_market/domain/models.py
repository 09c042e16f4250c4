"""Domain models for pm_market: pure dataclasses, no persistence logic."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import MarketStatus, TradeSide


@dataclass
class Market:
    id: str
    title: str
    description: str | None
    category: str | None
    closes_at: datetime | None
    status: str                  # MarketStatus value
    outcome: str | None          # MarketOutcome value, set iff status == resolved
    yes_price: int               # cents, [1, 99]
    no_price: int                # cents, [1, 99], independent of yes_price
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @property
    def is_open(self) -> bool:
        return self.status == MarketStatus.OPEN.value

    @property
    def is_resolved(self) -> bool:
        return self.status == MarketStatus.RESOLVED.value

    def price_for(self, side: TradeSide | str) -> int:
        """Current price per share for the given side."""
        return self.yes_price if TradeSide(side) is TradeSide.YES else self.no_price


@dataclass
class NewMarket:
    """Validated input for market creation."""

    title: str
    description: str | None
    category: str | None
    closes_at: datetime | None
    yes_price: int
    no_price: int
