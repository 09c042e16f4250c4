"""Repository Protocol: dependency inversion for testability."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_trade.domain.models import Trade, TradeWithMarket


class TradeRepositoryProtocol(Protocol):
    async def insert_trade(self, db: AsyncSession, trade: Trade) -> Trade: ...

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str | None,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[TradeWithMarket]: ...
