"""TradeRepository: append-only trade records, reads joined with markets."""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InternalError
from src.pm_trade.domain.models import Trade, TradeMarketSummary, TradeWithMarket

_INSERT_SQL = text("""
    INSERT INTO trades (id, user_id, market_id, side, shares, price_per_share)
    VALUES (:id, :user_id, :market_id, :side, :shares, :price_per_share)
    RETURNING id, user_id, market_id, side, shares, price_per_share, created_at
""")

_LIST_SQL = text("""
    SELECT t.id, t.user_id, t.market_id, t.side, t.shares, t.price_per_share, t.created_at,
           m.id AS m_id, m.title AS m_title, m.status AS m_status, m.outcome AS m_outcome,
           m.yes_price AS m_yes_price, m.no_price AS m_no_price
    FROM trades t
    LEFT JOIN markets m ON m.id = t.market_id
    WHERE t.user_id = :user_id
      AND (CAST(:market_id AS TEXT) IS NULL OR t.market_id = CAST(:market_id AS TEXT))
      AND (
          CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
          OR t.created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
          OR (
              t.created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
              AND t.id < CAST(:cursor_id AS TEXT)
          )
      )
    ORDER BY t.created_at DESC, t.id DESC
    LIMIT :limit
""")


def _row_to_trade(row: Any) -> Trade:
    return Trade(
        id=row.id,
        user_id=row.user_id,
        market_id=row.market_id,
        side=row.side,
        shares=row.shares,
        price_per_share=row.price_per_share,
        created_at=row.created_at,
    )


def _row_to_trade_with_market(row: Any) -> TradeWithMarket:
    market = None
    if row.m_id is not None:
        market = TradeMarketSummary(
            id=row.m_id,
            title=row.m_title,
            status=row.m_status,
            outcome=row.m_outcome,
            yes_price=row.m_yes_price,
            no_price=row.m_no_price,
        )
    return TradeWithMarket(trade=_row_to_trade(row), market=market)


class TradeRepository:
    async def insert_trade(self, db: AsyncSession, trade: Trade) -> Trade:
        row = (
            await db.execute(
                _INSERT_SQL,
                {
                    "id": trade.id,
                    "user_id": trade.user_id,
                    "market_id": trade.market_id,
                    "side": trade.side,
                    "shares": trade.shares,
                    "price_per_share": trade.price_per_share,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("Trade insert returned no rows, this should never happen")
        return _row_to_trade(row)

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str | None,
        cursor_ts: datetime | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[TradeWithMarket]:
        rows = (
            await db.execute(
                _LIST_SQL,
                {
                    "user_id": user_id,
                    "market_id": market_id,
                    "cursor_ts": cursor_ts,
                    "cursor_id": cursor_id,
                    "limit": limit,
                },
            )
        ).fetchall()
        return [_row_to_trade_with_market(r) for r in rows]
