"""TradeEngine: buy shares of one side of a market at its current price.

One transaction per trade:
  1. read the market row FOR SHARE (resolution's status flip waits on it)
  2. check it is open, price the trade from the row just read
  3. conditional debit of the buyer's balance (row lock, never negative)
  4. append the trade record
  5. upsert the buyer's position

Any failure rolls back every step. Transient store failures retry the
whole transaction through with_store_retry.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.cents import trade_cost
from src.pm_common.enums import TradeSide
from src.pm_common.errors import InvalidArgumentError
from src.pm_common.id_generator import generate_id
from src.pm_common.retry import with_store_retry
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_risk.rules.market_status import check_market_open
from src.pm_risk.rules.share_limit import check_share_quantity
from src.pm_trade.application.schemas import PlaceTradeResponse
from src.pm_trade.domain.models import Trade
from src.pm_trade.domain.repository import TradeRepositoryProtocol
from src.pm_trade.infrastructure.persistence import TradeRepository

logger = logging.getLogger(__name__)


def parse_side(side: str) -> TradeSide:
    try:
        return TradeSide(str(side).strip().lower())
    except ValueError:
        raise InvalidArgumentError(f"side must be 'yes' or 'no', got {side!r}") from None


class TradeEngine:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        trade_repo: TradeRepositoryProtocol | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._trades: TradeRepositoryProtocol = trade_repo or TradeRepository()

    async def place_trade(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str,
        side: str,
        shares: int,
    ) -> PlaceTradeResponse:
        trade_side = parse_side(side)
        check_share_quantity(shares)

        async def _attempt() -> PlaceTradeResponse:
            return await self._execute(db, user_id, market_id, trade_side, shares)

        return await with_store_retry(_attempt, name="place_trade")

    async def _execute(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str,
        side: TradeSide,
        shares: int,
    ) -> PlaceTradeResponse:
        try:
            market = check_market_open(
                await self._markets.get_market_for_trade(db, market_id), market_id
            )
            price = market.price_for(side)
            total = trade_cost(price, shares)
            trade_id = generate_id("TRD")

            balance, _ = await self._accounts.debit(
                db,
                user_id,
                total,
                "TRADE",
                trade_id,
                f"Bought {shares} {side.value.upper()} @ {price}¢",
            )
            trade = await self._trades.insert_trade(
                db,
                Trade(
                    id=trade_id,
                    user_id=user_id,
                    market_id=market_id,
                    side=side.value,
                    shares=shares,
                    price_per_share=price,
                ),
            )
            await self._accounts.add_shares(
                db, user_id, market_id, side.value, shares, total
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Trade %s: user=%s market=%s side=%s shares=%d price=%d balance_after=%d",
            trade.id,
            user_id,
            market_id,
            side.value,
            shares,
            price,
            balance.play_cash_balance,
        )
        return PlaceTradeResponse.build(trade, balance.play_cash_balance)
