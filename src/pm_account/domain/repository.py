"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Balance, Holding, LedgerEntry, Position


class AccountRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, user_id: str) -> Balance | None: ...

    async def open_balance(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> Balance | None: ...

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str,
        description: str,
    ) -> tuple[Balance, LedgerEntry]: ...

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        ref_type: str,
        ref_id: str,
        description: str,
    ) -> tuple[Balance, LedgerEntry]: ...

    async def add_shares(
        self,
        db: AsyncSession,
        user_id: str,
        market_id: str,
        side: str,
        shares: int,
        cost: int,
    ) -> Position: ...

    async def lock_positions_for_market(
        self, db: AsyncSession, market_id: str
    ) -> list[Position]: ...

    async def list_holdings(self, db: AsyncSession, user_id: str) -> list[Holding]: ...

    async def get_holding(
        self, db: AsyncSession, user_id: str, market_id: str
    ) -> Holding | None: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...
