"""TradeQueryService: a user's own trade history, newest first."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_trade.application.schemas import (
    TradeListItem,
    TradeListResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_trade.domain.repository import TradeRepositoryProtocol
from src.pm_trade.infrastructure.persistence import TradeRepository


class TradeQueryService:
    def __init__(self, repo: TradeRepositoryProtocol | None = None) -> None:
        self._repo: TradeRepositoryProtocol = repo or TradeRepository()

    async def list_trades(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str | None,
        cursor: str | None,
        limit: int,
    ) -> TradeListResponse:
        cursor_ts, cursor_id = cursor_decode(cursor)
        rows = await self._repo.list_by_user(
            db, user_id, market_id, cursor_ts, cursor_id, limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = cursor_encode(page[-1].trade) if has_more and page else None
        return TradeListResponse(
            items=[TradeListItem.from_joined(r) for r in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
