"""Pydantic schemas for pm_admin API."""

from pydantic import BaseModel

from src.pm_clearing.domain.settlement import SettlementSummary
from src.pm_common.cents import cents_to_display
from src.pm_market.application.schemas import MarketItem


class ResolveRequest(BaseModel):
    outcome: str


class ResolveMarketRpcRequest(BaseModel):
    p_market_id: str
    p_outcome: str


class ResolveMarketResponse(BaseModel):
    market: MarketItem
    winners: int
    winning_shares: int
    total_payout_cents: int
    total_payout_display: str

    @classmethod
    def build(cls, market: MarketItem, summary: SettlementSummary) -> "ResolveMarketResponse":
        return cls(
            market=market,
            winners=summary.winners,
            winning_shares=summary.winning_shares,
            total_payout_cents=summary.total_payout,
            total_payout_display=cents_to_display(summary.total_payout),
        )


class MarketStatsResponse(BaseModel):
    market_id: str
    status: str
    total_trades: int
    yes_shares: int
    no_shares: int
    total_volume_cents: int
    total_volume_display: str
    unique_traders: int
