# src/pm_admin/application/service.py
"""Admin application service: market writes and resolution.

Every write runs in one transaction owned here and is retried as a whole
on transient store failures. Callers are already verified by require_admin.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_admin.application.schemas import MarketStatsResponse, ResolveMarketResponse
from src.pm_clearing.domain.settlement import settle_market
from src.pm_common.cents import cents_to_display
from src.pm_common.enums import MarketOutcome, MarketStatus
from src.pm_common.errors import (
    AlreadyResolvedError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
    MarketNotFoundError,
)
from src.pm_common.id_generator import generate_id
from src.pm_common.retry import with_store_retry
from src.pm_market.application.schemas import CreateMarketRequest, MarketItem
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_risk.rules.price_range import check_price_range

logger = logging.getLogger(__name__)

_TRADING_STATUSES = frozenset({MarketStatus.OPEN.value, MarketStatus.CLOSED.value})

_STATS_SQL = text("""
    SELECT
        COUNT(*) AS total_trades,
        COALESCE(SUM(shares) FILTER (WHERE side = 'yes'), 0) AS yes_shares,
        COALESCE(SUM(shares) FILTER (WHERE side = 'no'), 0) AS no_shares,
        COALESCE(SUM(shares * price_per_share), 0) AS total_volume,
        COUNT(DISTINCT user_id) AS unique_traders
    FROM trades
    WHERE market_id = :market_id
""")


def parse_outcome(outcome: str) -> MarketOutcome:
    try:
        return MarketOutcome(str(outcome).strip().lower())
    except ValueError:
        raise InvalidArgumentError(
            f"outcome must be 'resolved_yes' or 'resolved_no', got {outcome!r}"
        ) from None


class AdminService:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()

    async def create_market(self, db: AsyncSession, req: CreateMarketRequest) -> MarketItem:
        check_price_range(req.yes_price, "yes_price")
        check_price_range(req.no_price, "no_price")
        new = req.to_domain()

        async def _attempt() -> Market:
            try:
                market = await self._markets.create_market(db, generate_id("MKT"), new)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            return market

        market = await with_store_retry(_attempt, name="create_market")
        logger.info("Created market %s: %s", market.id, market.title)
        return MarketItem.from_domain(market)

    async def update_market_status(
        self, db: AsyncSession, market_id: str, status: str
    ) -> MarketItem:
        target = str(status).strip().lower()
        if target == MarketStatus.RESOLVED.value:
            current = await self._require_market(db, market_id)
            raise InvalidStatusTransitionError(current.status, target)
        if target not in _TRADING_STATUSES:
            raise InvalidArgumentError(f"status must be 'open' or 'closed', got {status!r}")

        async def _attempt() -> Market | None:
            try:
                market = await self._markets.set_trading_status(db, market_id, target)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            return market

        market = await with_store_retry(_attempt, name="update_market_status")
        if market is None:
            await self._raise_not_updatable(db, market_id, target)
        logger.info("Market %s status -> %s", market_id, target)
        return MarketItem.from_domain(market)

    async def resolve_market(
        self, db: AsyncSession, market_id: str, outcome: str
    ) -> ResolveMarketResponse:
        parsed = parse_outcome(outcome)

        async def _attempt() -> ResolveMarketResponse:
            try:
                market = await self._markets.mark_resolved(db, market_id, parsed.value)
                if market is None:
                    await self._raise_not_updatable(db, market_id, MarketStatus.RESOLVED.value)
                summary = await settle_market(
                    db, market_id, parsed, self._accounts, settings.PAYOUT_PER_SHARE_CENTS
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            return ResolveMarketResponse.build(MarketItem.from_domain(market), summary)

        result = await with_store_retry(_attempt, name="resolve_market")
        logger.info(
            "Resolved market %s as %s, paid %d winners %s",
            market_id,
            parsed.value,
            result.winners,
            result.total_payout_display,
        )
        return result

    async def get_market_stats(self, db: AsyncSession, market_id: str) -> MarketStatsResponse:
        market = await self._require_market(db, market_id)
        stats = (await db.execute(_STATS_SQL, {"market_id": market_id})).fetchone()
        total_volume = int(stats.total_volume) if stats else 0
        return MarketStatsResponse(
            market_id=market_id,
            status=market.status,
            total_trades=int(stats.total_trades) if stats else 0,
            yes_shares=int(stats.yes_shares) if stats else 0,
            no_shares=int(stats.no_shares) if stats else 0,
            total_volume_cents=total_volume,
            total_volume_display=cents_to_display(total_volume),
            unique_traders=int(stats.unique_traders) if stats else 0,
        )

    async def _require_market(self, db: AsyncSession, market_id: str) -> Market:
        market = await self._markets.get_market_by_id(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def _raise_not_updatable(
        self, db: AsyncSession, market_id: str, target: str
    ) -> None:
        """A conditional market UPDATE matched nothing: say why."""
        market = await self._require_market(db, market_id)
        if market.is_resolved:
            raise AlreadyResolvedError(market_id)
        raise InvalidStatusTransitionError(market.status, target)
