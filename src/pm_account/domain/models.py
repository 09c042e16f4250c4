"""Domain models for pm_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Balance:
    user_id: str
    play_cash_balance: int   # cents, never negative
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Position:
    """Materialized sum of one user's shares in one market, per side."""

    user_id: str
    market_id: str
    yes_shares: int = 0
    yes_cost_sum: int = 0       # cents, total paid for YES shares
    no_shares: int = 0
    no_cost_sum: int = 0        # cents, total paid for NO shares
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def shares_for(self, side: str) -> int:
        return self.yes_shares if side == "yes" else self.no_shares


@dataclass
class Holding:
    """Position joined with the market it belongs to (portfolio view)."""

    market_id: str
    title: str
    market_status: str
    market_outcome: str | None
    yes_shares: int
    yes_cost_sum: int
    no_shares: int
    no_cost_sum: int


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # cents, positive=credit negative=debit
    balance_after: int               # cents, play_cash_balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
