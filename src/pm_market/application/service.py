"""MarketApplicationService: public, read-only market queries.

No session or commit needed; writes go through pm_admin.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import MarketStatus
from src.pm_common.errors import InvalidArgumentError, MarketNotFoundError
from src.pm_market.application.schemas import (
    CategoryListResponse,
    MarketItem,
    MarketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository

ALL = "all"
DEFAULT_STATUS = MarketStatus.OPEN.value


class MarketApplicationService:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor: str | None,
        limit: int,
    ) -> MarketListResponse:
        # status defaults to open; 'all' lifts the filter
        status = DEFAULT_STATUS if status is None else status
        sql_status = None if status == ALL else status
        if sql_status is not None and sql_status not in {s.value for s in MarketStatus}:
            raise InvalidArgumentError(f"unknown status '{status}'")
        sql_category = None if category in (None, ALL) else category
        cursor_ts, cursor_id = cursor_decode(cursor)

        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(
            db, sql_status, sql_category, cursor_ts, cursor_id, limit + 1
        )
        has_more = len(markets) > limit
        page = markets[:limit]

        items = [MarketItem.from_domain(m) for m in page]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def list_categories(self, db: AsyncSession) -> CategoryListResponse:
        return CategoryListResponse(categories=await self._repo.list_categories(db))

    async def get_market(self, db: AsyncSession, market_id: str) -> MarketItem:
        market = await self._repo.get_market_by_id(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return MarketItem.from_domain(market)
