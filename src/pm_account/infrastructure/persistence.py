"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
The conditional debit takes the balance row lock, so concurrent debits for
the same user serialize and a result of 0 rows means insufficient funds.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back the session.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Balance, Holding, LedgerEntry, Position
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import BalanceNotFoundError, InsufficientFundsError, InternalError

# ---------------------------------------------------------------------------
# SQL: balances mutations
# ---------------------------------------------------------------------------

_OPEN_BALANCE_SQL = text("""
    INSERT INTO balances (user_id, play_cash_balance)
    VALUES (:user_id, :amount)
    ON CONFLICT (user_id) DO NOTHING
    RETURNING user_id, play_cash_balance, version, created_at, updated_at
""")

_DEBIT_SQL = text("""
    UPDATE balances
    SET play_cash_balance = play_cash_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND play_cash_balance >= :amount
    RETURNING user_id, play_cash_balance, version, created_at, updated_at
""")

_CREDIT_SQL = text("""
    UPDATE balances
    SET play_cash_balance = play_cash_balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING user_id, play_cash_balance, version, created_at, updated_at
""")

_GET_BALANCE_SQL = text("""
    SELECT user_id, play_cash_balance, version, created_at, updated_at
    FROM balances
    WHERE user_id = :user_id
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, entry_type, amount, balance_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# SQL: positions
# ---------------------------------------------------------------------------

_ADD_YES_SHARES_SQL = text("""
    INSERT INTO positions (user_id, market_id, yes_shares, yes_cost_sum)
    VALUES (:user_id, :market_id, :shares, :cost)
    ON CONFLICT (user_id, market_id) DO UPDATE
        SET yes_shares   = positions.yes_shares + EXCLUDED.yes_shares,
            yes_cost_sum = positions.yes_cost_sum + EXCLUDED.yes_cost_sum,
            updated_at   = NOW()
    RETURNING user_id, market_id, yes_shares, yes_cost_sum,
              no_shares, no_cost_sum, created_at, updated_at
""")

_ADD_NO_SHARES_SQL = text("""
    INSERT INTO positions (user_id, market_id, no_shares, no_cost_sum)
    VALUES (:user_id, :market_id, :shares, :cost)
    ON CONFLICT (user_id, market_id) DO UPDATE
        SET no_shares   = positions.no_shares + EXCLUDED.no_shares,
            no_cost_sum = positions.no_cost_sum + EXCLUDED.no_cost_sum,
            updated_at  = NOW()
    RETURNING user_id, market_id, yes_shares, yes_cost_sum,
              no_shares, no_cost_sum, created_at, updated_at
""")

_LOCK_MARKET_POSITIONS_SQL = text("""
    SELECT user_id, market_id, yes_shares, yes_cost_sum,
           no_shares, no_cost_sum, created_at, updated_at
    FROM positions
    WHERE market_id = :market_id
    ORDER BY user_id
    FOR UPDATE
""")

_LIST_HOLDINGS_SQL = text("""
    SELECT p.market_id, m.title, m.status AS market_status, m.outcome AS market_outcome,
           p.yes_shares, p.yes_cost_sum, p.no_shares, p.no_cost_sum
    FROM positions p
    JOIN markets m ON m.id = p.market_id
    WHERE p.user_id = :user_id
      AND (p.yes_shares > 0 OR p.no_shares > 0)
    ORDER BY m.created_at DESC, p.market_id DESC
""")

_GET_HOLDING_SQL = text("""
    SELECT p.market_id, m.title, m.status AS market_status, m.outcome AS market_outcome,
           p.yes_shares, p.yes_cost_sum, p.no_shares, p.no_cost_sum
    FROM positions p
    JOIN markets m ON m.id = p.market_id
    WHERE p.user_id = :user_id AND p.market_id = :market_id
""")


def _row_to_balance(row: object) -> Balance:
    return Balance(
        user_id=row.user_id,  # type: ignore[attr-defined]
        play_cash_balance=row.play_cash_balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_position(row: object) -> Position:
    return Position(
        user_id=row.user_id,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        yes_shares=row.yes_shares,  # type: ignore[attr-defined]
        yes_cost_sum=row.yes_cost_sum,  # type: ignore[attr-defined]
        no_shares=row.no_shares,  # type: ignore[attr-defined]
        no_cost_sum=row.no_cost_sum,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_holding(row: object) -> Holding:
    return Holding(
        market_id=row.market_id,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        market_status=row.market_status,  # type: ignore[attr-defined]
        market_outcome=row.market_outcome,  # type: ignore[attr-defined]
        yes_shares=row.yes_shares,  # type: ignore[attr-defined]
        yes_cost_sum=row.yes_cost_sum,  # type: ignore[attr-defined]
        no_shares=row.no_shares,  # type: ignore[attr-defined]
        no_cost_sum=row.no_cost_sum,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_balance(self, db: AsyncSession, user_id: str) -> Balance | None:
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_balance(row) if row else None

    async def open_balance(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> Balance | None:
        """Create the user's balance row. Returns None if it already exists."""
        result = await db.execute(_OPEN_BALANCE_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            return None
        balance = _row_to_balance(row)
        await self._write_ledger(
            db,
            user_id=user_id,
            entry_type=LedgerEntryType.OPENING_BALANCE,
            amount=amount,
            balance_after=balance.play_cash_balance,
            ref_type="SIGNUP",
            ref_id=None,
            description="Opening play cash",
        )
        return balance

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str,
        description: str,
    ) -> tuple[Balance, LedgerEntry]:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_balance(db, user_id)
            if current is None:
                raise BalanceNotFoundError(user_id)
            raise InsufficientFundsError(amount, current.play_cash_balance)
        balance = _row_to_balance(row)
        entry = await self._write_ledger(
            db,
            user_id=user_id,
            entry_type=LedgerEntryType.TRADE_DEBIT,
            amount=-amount,
            balance_after=balance.play_cash_balance,
            ref_type=ref_type,
            ref_id=ref_id,
            description=description,
        )
        return balance, entry

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str,
        description: str,
    ) -> tuple[Balance, LedgerEntry]:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise BalanceNotFoundError(user_id)
        balance = _row_to_balance(row)
        entry = await self._write_ledger(
            db,
            user_id=user_id,
            entry_type=LedgerEntryType.SETTLEMENT_PAYOUT,
            amount=amount,
            balance_after=balance.play_cash_balance,
            ref_type=ref_type,
            ref_id=ref_id,
            description=description,
        )
        return balance, entry

    async def add_shares(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str,
        side: str,
        shares: int,
        cost: int,
    ) -> Position:
        sql = _ADD_YES_SHARES_SQL if side == "yes" else _ADD_NO_SHARES_SQL
        result = await db.execute(
            sql,
            {"user_id": user_id, "market_id": market_id, "shares": shares, "cost": cost},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Position upsert returned no rows, this should never happen")
        return _row_to_position(row)

    async def lock_positions_for_market(
        self, db: AsyncSession, market_id: str
    ) -> list[Position]:
        result = await db.execute(_LOCK_MARKET_POSITIONS_SQL, {"market_id": market_id})
        return [_row_to_position(row) for row in result.fetchall()]

    async def list_holdings(self, db: AsyncSession, user_id: str) -> list[Holding]:
        result = await db.execute(_LIST_HOLDINGS_SQL, {"user_id": user_id})
        return [_row_to_holding(row) for row in result.fetchall()]

    async def get_holding(
        self, db: AsyncSession, user_id: str, market_id: str
    ) -> Holding | None:
        result = await db.execute(
            _GET_HOLDING_SQL, {"user_id": user_id, "market_id": market_id}
        )
        row = result.fetchone()
        return _row_to_holding(row) if row else None

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]

    async def _write_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: LedgerEntryType,
        amount: int,
        balance_after: int,
        ref_type: str | None,
        ref_id: str | None,
        description: str,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": user_id,
                "entry_type": entry_type.value,
                "amount": amount,
                "balance_after": balance_after,
                "reference_type": ref_type,
                "reference_id": ref_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows, this should never happen")
        return _row_to_ledger(row)
