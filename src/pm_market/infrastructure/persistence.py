"""MarketRepository: concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Locking:
  - get_market_for_trade reads the row FOR SHARE: concurrent trades on the
    same market proceed together, but a resolution (row UPDATE) waits for
    them and they wait for it.
  - set_trading_status / mark_resolved are single conditional UPDATEs; the
    WHERE clause carries the allowed source states.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InternalError
from src.pm_market.domain.models import Market, NewMarket

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, title, description, category, closes_at, status, outcome,
    yes_price, no_price, resolved_at, created_at, updated_at
"""

_GET_MARKET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM markets
    WHERE id = :market_id
""")

_GET_MARKET_FOR_TRADE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM markets
    WHERE id = :market_id
    FOR SHARE
""")

_LIST_MARKETS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM markets
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:category AS TEXT) IS NULL OR category = CAST(:category AS TEXT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND id < CAST(:cursor_id AS TEXT)
            )
        )
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_CATEGORIES_SQL = text("""
    SELECT DISTINCT category
    FROM markets
    WHERE category IS NOT NULL
    ORDER BY category
""")

_INSERT_MARKET_SQL = text(f"""
    INSERT INTO markets
        (id, title, description, category, closes_at, status, yes_price, no_price)
    VALUES
        (:id, :title, :description, :category, :closes_at, 'open', :yes_price, :no_price)
    RETURNING {_COLUMNS}
""")

_SET_TRADING_STATUS_SQL = text(f"""
    UPDATE markets
    SET status = :status,
        updated_at = NOW()
    WHERE id = :market_id
      AND status IN ('open', 'closed')
    RETURNING {_COLUMNS}
""")

_MARK_RESOLVED_SQL = text(f"""
    UPDATE markets
    SET status = 'resolved',
        outcome = :outcome,
        resolved_at = NOW(),
        updated_at = NOW()
    WHERE id = :market_id
      AND status IN ('open', 'closed')
    RETURNING {_COLUMNS}
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        closes_at=row.closes_at,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        yes_price=row.yes_price,  # type: ignore[attr-defined]
        no_price=row.no_price,  # type: ignore[attr-defined]
        resolved_at=row.resolved_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository. Callers own the transaction."""

    async def get_market_by_id(
        self, db: AsyncSession, market_id: str
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_SQL, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def get_market_for_trade(
        self, db: AsyncSession, market_id: str
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_FOR_TRADE_SQL, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        category: str | None,
        cursor_ts: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Market]:
        # asyncpg requires a real datetime object for TIMESTAMPTZ parameters,
        # not an ISO string.  Parse the cursor timestamp here.
        cursor_ts_dt: datetime | None = None
        if cursor_ts is not None:
            cursor_ts_dt = datetime.fromisoformat(cursor_ts)

        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "status": status,
                "category": category,
                "cursor_ts": cursor_ts_dt,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def list_categories(self, db: AsyncSession) -> list[str]:
        result = await db.execute(_LIST_CATEGORIES_SQL)
        return [row.category for row in result.fetchall()]

    async def create_market(
        self, db: AsyncSession, market_id: str, new: NewMarket
    ) -> Market:
        result = await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": market_id,
                "title": new.title,
                "description": new.description,
                "category": new.category,
                "closes_at": new.closes_at,
                "yes_price": new.yes_price,
                "no_price": new.no_price,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Market insert returned no rows, this should never happen")
        return _row_to_market(row)

    async def set_trading_status(
        self, db: AsyncSession, market_id: str, status: str
    ) -> Market | None:
        """Toggle open/closed. None if the market is missing or already resolved."""
        result = await db.execute(
            _SET_TRADING_STATUS_SQL, {"market_id": market_id, "status": status}
        )
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def mark_resolved(
        self, db: AsyncSession, market_id: str, outcome: str
    ) -> Market | None:
        """Flip to resolved. None if the market is missing or already resolved."""
        result = await db.execute(
            _MARK_RESOLVED_SQL, {"market_id": market_id, "outcome": outcome}
        )
        row = result.fetchone()
        return _row_to_market(row) if row else None
