"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_market.domain.models import Market, NewMarket


class MarketRepositoryProtocol(Protocol):
    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Market]: ...

    async def list_categories(self, db: AsyncSession) -> list[str]: ...

    async def get_market_by_id(
        self,
        db: AsyncSession,
        market_id: str,
    ) -> Market | None: ...

    async def get_market_for_trade(
        self,
        db: AsyncSession,
        market_id: str,
    ) -> Market | None: ...

    async def create_market(
        self,
        db: AsyncSession,
        market_id: str,
        new: NewMarket,
    ) -> Market: ...

    async def set_trading_status(
        self,
        db: AsyncSession,
        market_id: str,
        status: str,
    ) -> Market | None: ...

    async def mark_resolved(
        self,
        db: AsyncSession,
        market_id: str,
        outcome: str,
    ) -> Market | None: ...
