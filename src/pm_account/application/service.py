"""AccountApplicationService: thin composition layer.

All methods here are read-only; balances and positions are only ever
mutated by the trade engine and the resolution engine.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.application.schemas import (
    BalanceResponse,
    HoldingListResponse,
    HoldingResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.cents import cents_to_display
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import (
    BalanceNotFoundError,
    InvalidArgumentError,
    PositionNotFoundError,
)


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        balance = await self._repo.get_balance(db, user_id)
        if balance is None:
            raise BalanceNotFoundError(user_id)
        return BalanceResponse.from_cents(user_id, balance.play_cash_balance)

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        if entry_type is not None and entry_type not in {e.value for e in LedgerEntryType}:
            raise InvalidArgumentError(f"unknown entry_type '{entry_type}'")
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(
            db, user_id, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount_cents=e.amount,
                amount_display=cents_to_display(e.amount),
                balance_after_cents=e.balance_after,
                balance_after_display=cents_to_display(e.balance_after),
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def list_holdings(self, db: AsyncSession, user_id: str) -> HoldingListResponse:
        holdings = await self._repo.list_holdings(db, user_id)
        return HoldingListResponse(
            items=[HoldingResponse.from_domain(h) for h in holdings],
            total=len(holdings),
        )

    async def get_holding(
        self, db: AsyncSession, user_id: str, market_id: str
    ) -> HoldingResponse:
        holding = await self._repo.get_holding(db, user_id, market_id)
        if holding is None:
            raise PositionNotFoundError(market_id)
        return HoldingResponse.from_domain(holding)
