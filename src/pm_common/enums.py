"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class MarketStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    RESOLVED = "resolved"


class MarketOutcome(str, Enum):
    RESOLVED_YES = "resolved_yes"
    RESOLVED_NO = "resolved_no"

    @property
    def winning_side(self) -> "TradeSide":
        return TradeSide.YES if self is MarketOutcome.RESOLVED_YES else TradeSide.NO


class TradeSide(str, Enum):
    YES = "yes"
    NO = "no"


class UserRole(str, Enum):
    TRADER = "trader"
    ADMIN = "admin"


class LedgerEntryType(str, Enum):
    OPENING_BALANCE = "OPENING_BALANCE"
    TRADE_DEBIT = "TRADE_DEBIT"
    SETTLEMENT_PAYOUT = "SETTLEMENT_PAYOUT"
