"""Market settlement: pay each winning share PAYOUT_PER_SHARE_CENTS.

compute_payouts is pure and works on plain Position values; settle_market
locks the market's positions and applies the credits through the account
repository. Positions are left in place after settlement: the resolved
market status is what stops a second payout.

Transaction ownership: the caller commits or rolls back.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Position
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_common.enums import MarketOutcome

logger = logging.getLogger(__name__)


@dataclass
class Payout:
    user_id: str
    shares: int
    amount: int     # cents


@dataclass
class SettlementSummary:
    outcome: str
    payouts: list[Payout] = field(default_factory=list)

    @property
    def winners(self) -> int:
        return len(self.payouts)

    @property
    def winning_shares(self) -> int:
        return sum(p.shares for p in self.payouts)

    @property
    def total_payout(self) -> int:
        return sum(p.amount for p in self.payouts)


def compute_payouts(
    positions: list[Position],
    outcome: MarketOutcome,
    payout_per_share: int,
) -> SettlementSummary:
    """One Payout per position holding at least one winning share."""
    side = outcome.winning_side.value
    summary = SettlementSummary(outcome=outcome.value)
    for pos in positions:
        shares = pos.shares_for(side)
        if shares > 0:
            summary.payouts.append(
                Payout(user_id=pos.user_id, shares=shares, amount=shares * payout_per_share)
            )
    return summary


async def settle_market(
    db: AsyncSession,
    market_id: str,
    outcome: MarketOutcome,
    account_repo: AccountRepositoryProtocol,
    payout_per_share: int,
) -> SettlementSummary:
    positions = await account_repo.lock_positions_for_market(db, market_id)
    summary = compute_payouts(positions, outcome, payout_per_share)
    for p in summary.payouts:
        await account_repo.credit(
            db,
            p.user_id,
            p.amount,
            "SETTLEMENT",
            market_id,
            f"Payout {p.shares} {outcome.winning_side.value.upper()} shares",
        )
    logger.info(
        "Settled market %s as %s: winners=%d shares=%d total_payout=%d",
        market_id,
        outcome.value,
        summary.winners,
        summary.winning_shares,
        summary.total_payout,
    )
    return summary
