"""Pydantic schemas and cursor utilities for pm_account API."""

import base64
import json

from pydantic import BaseModel

from src.pm_account.domain.models import Holding
from src.pm_common.cents import cents_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    play_cash_balance_cents: int
    play_cash_balance_display: str

    @classmethod
    def from_cents(cls, user_id: str, balance: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            play_cash_balance_cents=balance,
            play_cash_balance_display=cents_to_display(balance),
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool


class HoldingResponse(BaseModel):
    market_id: str
    title: str
    market_status: str
    market_outcome: str | None
    yes_shares: int
    yes_cost_sum_cents: int
    no_shares: int
    no_cost_sum_cents: int
    total_cost_display: str

    @classmethod
    def from_domain(cls, h: Holding) -> "HoldingResponse":
        return cls(
            market_id=h.market_id,
            title=h.title,
            market_status=h.market_status,
            market_outcome=h.market_outcome,
            yes_shares=h.yes_shares,
            yes_cost_sum_cents=h.yes_cost_sum,
            no_shares=h.no_shares,
            no_cost_sum_cents=h.no_cost_sum,
            total_cost_display=cents_to_display(h.yes_cost_sum + h.no_cost_sum),
        )


class HoldingListResponse(BaseModel):
    items: list[HoldingResponse]
    total: int
