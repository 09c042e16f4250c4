"""Pydantic schemas for pm_trade API.

The place_trade body keeps the RPC parameter names (p_market_id, p_side,
p_shares). Range checks on side/shares happen in the engine so that a bad
value surfaces as InvalidArgument (4001) rather than a generic 422.

Cursor format for trades: {"ts": "<created_at ISO>", "id": "<trade_id>"}
"""

import base64
import json
from datetime import datetime

from pydantic import BaseModel

from src.pm_common.cents import cents_to_display, price_to_display
from src.pm_common.datetime_utils import to_iso
from src.pm_trade.domain.models import Trade, TradeMarketSummary, TradeWithMarket


def cursor_encode(last: Trade) -> str:
    payload = {"ts": last.created_at.isoformat() if last.created_at else "", "id": last.id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime | None, str | None]:
    """Decode composite cursor -> (created_at, trade_id), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["ts"]), str(data["id"])
    except (ValueError, KeyError, TypeError):
        return None, None


class PlaceTradeRequest(BaseModel):
    p_market_id: str
    p_side: str
    p_shares: int


class TradeResponse(BaseModel):
    id: str
    market_id: str
    side: str
    shares: int
    price_per_share: int
    price_display: str
    total_cost_cents: int
    total_cost_display: str
    created_at: str | None

    @classmethod
    def from_domain(cls, t: Trade) -> "TradeResponse":
        return cls(
            id=t.id,
            market_id=t.market_id,
            side=t.side,
            shares=t.shares,
            price_per_share=t.price_per_share,
            price_display=price_to_display(t.price_per_share),
            total_cost_cents=t.total_cost,
            total_cost_display=cents_to_display(t.total_cost),
            created_at=to_iso(t.created_at),
        )


class PlaceTradeResponse(BaseModel):
    trade: TradeResponse
    balance_after_cents: int
    balance_after_display: str

    @classmethod
    def build(cls, trade: Trade, balance_after: int) -> "PlaceTradeResponse":
        return cls(
            trade=TradeResponse.from_domain(trade),
            balance_after_cents=balance_after,
            balance_after_display=cents_to_display(balance_after),
        )


class TradeMarketInfo(BaseModel):
    id: str
    title: str
    status: str
    outcome: str | None
    yes_price: int
    no_price: int

    @classmethod
    def from_domain(cls, m: TradeMarketSummary) -> "TradeMarketInfo":
        return cls(
            id=m.id,
            title=m.title,
            status=m.status,
            outcome=m.outcome,
            yes_price=m.yes_price,
            no_price=m.no_price,
        )


class TradeListItem(TradeResponse):
    market: TradeMarketInfo | None

    @classmethod
    def from_joined(cls, row: TradeWithMarket) -> "TradeListItem":
        base = TradeResponse.from_domain(row.trade)
        market = TradeMarketInfo.from_domain(row.market) if row.market else None
        return cls(**base.model_dump(), market=market)


class TradeListResponse(BaseModel):
    items: list[TradeListItem]
    next_cursor: str | None
    has_more: bool
