# tests/unit/test_admin_service.py
"""Unit tests for AdminService: create, status changes, resolve, stats."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.pm_account.domain.models import Position
from src.pm_admin.application.service import AdminService, parse_outcome
from src.pm_clearing.domain.settlement import SettlementSummary
from src.pm_common.errors import (
    AlreadyResolvedError,
    BalanceNotFoundError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
    MarketNotFoundError,
    StoreUnavailableError,
)
from src.pm_market.application.schemas import CreateMarketRequest
from src.pm_market.domain.models import Market


def _market(**kwargs) -> Market:
    now = datetime.now(UTC)
    defaults = dict(
        id="MKT-1", title="Will it rain?", description=None, category=None,
        closes_at=None, status="open", outcome=None, yes_price=55, no_price=45,
        resolved_at=None, created_at=now, updated_at=now,
    )
    defaults.update(kwargs)
    return Market(**defaults)


def _winning_positions() -> list[Position]:
    return [
        Position(user_id="user-1", market_id="MKT-1", yes_shares=10, yes_cost_sum=550),
        Position(user_id="user-2", market_id="MKT-1", yes_shares=5, yes_cost_sum=275),
        Position(user_id="user-3", market_id="MKT-1", no_shares=8, no_cost_sum=360),
    ]


@pytest.fixture
def markets() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def accounts() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def svc(markets: AsyncMock, accounts: AsyncMock) -> AdminService:
    return AdminService(market_repo=markets, account_repo=accounts)


class TestParseOutcome:
    def test_valid(self) -> None:
        assert parse_outcome("resolved_yes").value == "resolved_yes"
        assert parse_outcome("RESOLVED_NO").value == "resolved_no"

    @pytest.mark.parametrize("bad", ["yes", "YES", "", "resolved"])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_outcome(bad)


class TestCreateMarket:
    async def test_creates_open_market(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.create_market.side_effect = lambda db, market_id, new: _market(
            id=market_id, title=new.title, yes_price=new.yes_price, no_price=new.no_price
        )
        db = AsyncMock()

        item = await svc.create_market(
            db, CreateMarketRequest(title="Will it rain?", yes_price=60, no_price=45)
        )

        assert item.id.startswith("MKT-")
        assert item.status == "open"
        assert item.outcome is None
        assert (item.yes_price, item.no_price) == (60, 45)
        db.commit.assert_awaited_once()

    async def test_out_of_range_price_rejected(self, svc: AdminService, markets: AsyncMock) -> None:
        # model_construct skips pydantic validation, as a non-HTTP caller might
        req = CreateMarketRequest.model_construct(
            title="T", description=None, category=None, closes_at=None,
            yes_price=0, no_price=45,
        )
        with pytest.raises(InvalidArgumentError):
            await svc.create_market(AsyncMock(), req)
        markets.create_market.assert_not_awaited()


class TestUpdateMarketStatus:
    async def test_close_open_market(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.set_trading_status.return_value = _market(status="closed")
        db = AsyncMock()

        item = await svc.update_market_status(db, "MKT-1", "closed")

        markets.set_trading_status.assert_awaited_once_with(db, "MKT-1", "closed")
        assert item.status == "closed"
        db.commit.assert_awaited_once()

    async def test_resolved_target_rejected(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.get_market_by_id.return_value = _market(status="open")

        with pytest.raises(InvalidStatusTransitionError):
            await svc.update_market_status(AsyncMock(), "MKT-1", "resolved")
        markets.set_trading_status.assert_not_awaited()

    async def test_unknown_status_rejected(self, svc: AdminService) -> None:
        with pytest.raises(InvalidArgumentError):
            await svc.update_market_status(AsyncMock(), "MKT-1", "paused")

    async def test_resolved_market_is_already_resolved(
        self, svc: AdminService, markets: AsyncMock
    ) -> None:
        markets.set_trading_status.return_value = None
        markets.get_market_by_id.return_value = _market(status="resolved", outcome="resolved_yes")

        with pytest.raises(AlreadyResolvedError):
            await svc.update_market_status(AsyncMock(), "MKT-1", "open")

    async def test_missing_market(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.set_trading_status.return_value = None
        markets.get_market_by_id.return_value = None

        with pytest.raises(MarketNotFoundError):
            await svc.update_market_status(AsyncMock(), "MKT-404", "closed")


class TestResolveMarket:
    async def test_flips_status_then_settles(
        self, svc: AdminService, markets: AsyncMock, accounts: AsyncMock
    ) -> None:
        markets.mark_resolved.return_value = _market(status="resolved", outcome="resolved_yes")
        db = AsyncMock()
        summary = SettlementSummary(outcome="resolved_yes")
        with patch(
            "src.pm_admin.application.service.settle_market",
            AsyncMock(return_value=summary),
        ) as mock_settle:
            result = await svc.resolve_market(db, "MKT-1", "resolved_yes")

        markets.mark_resolved.assert_awaited_once_with(db, "MKT-1", "resolved_yes")
        settle_args = mock_settle.await_args.args
        assert settle_args[1] == "MKT-1"
        assert settle_args[2].value == "resolved_yes"
        assert settle_args[3] is accounts
        assert result.market.status == "resolved"
        assert result.market.outcome == "resolved_yes"
        db.commit.assert_awaited_once()

    async def test_second_resolve_is_already_resolved(
        self, svc: AdminService, markets: AsyncMock, accounts: AsyncMock
    ) -> None:
        markets.mark_resolved.return_value = None
        markets.get_market_by_id.return_value = _market(status="resolved", outcome="resolved_yes")
        db = AsyncMock()

        with pytest.raises(AlreadyResolvedError):
            await svc.resolve_market(db, "MKT-1", "resolved_no")

        accounts.lock_positions_for_market.assert_not_awaited()
        accounts.credit.assert_not_awaited()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_missing_market(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.mark_resolved.return_value = None
        markets.get_market_by_id.return_value = None

        with pytest.raises(MarketNotFoundError):
            await svc.resolve_market(AsyncMock(), "MKT-404", "resolved_yes")

    async def test_invalid_outcome_never_touches_store(
        self, svc: AdminService, markets: AsyncMock
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await svc.resolve_market(AsyncMock(), "MKT-1", "yes")
        markets.mark_resolved.assert_not_awaited()

    async def test_credit_failure_retries_whole_resolution(
        self, svc: AdminService, markets: AsyncMock, accounts: AsyncMock
    ) -> None:
        markets.mark_resolved.return_value = _market(status="resolved", outcome="resolved_yes")
        accounts.lock_positions_for_market.return_value = _winning_positions()
        accounts.credit.side_effect = [
            None,
            OperationalError("UPDATE balances", {}, Exception("connection reset")),
            None,
            None,
        ]
        db = AsyncMock()

        result = await svc.resolve_market(db, "MKT-1", "resolved_yes")

        assert markets.mark_resolved.await_count == 2
        assert accounts.credit.await_count == 4
        db.rollback.assert_awaited_once()
        db.commit.assert_awaited_once()
        assert result.winners == 2
        assert result.total_payout_cents == 1500

    async def test_business_failure_during_settlement_is_not_retried(
        self, svc: AdminService, markets: AsyncMock, accounts: AsyncMock
    ) -> None:
        markets.mark_resolved.return_value = _market(status="resolved", outcome="resolved_yes")
        accounts.lock_positions_for_market.return_value = _winning_positions()
        accounts.credit.side_effect = [None, BalanceNotFoundError("user-2")]
        db = AsyncMock()

        with pytest.raises(BalanceNotFoundError):
            await svc.resolve_market(db, "MKT-1", "resolved_yes")

        markets.mark_resolved.assert_awaited_once()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_persistent_store_failure_is_unavailable(
        self, svc: AdminService, markets: AsyncMock, accounts: AsyncMock
    ) -> None:
        markets.mark_resolved.return_value = _market(status="resolved", outcome="resolved_yes")
        accounts.lock_positions_for_market.return_value = _winning_positions()
        accounts.credit.side_effect = OperationalError(
            "UPDATE balances", {}, Exception("connection reset")
        )
        db = AsyncMock()

        with pytest.raises(StoreUnavailableError):
            await svc.resolve_market(db, "MKT-1", "resolved_yes")

        db.commit.assert_not_awaited()
        assert db.rollback.await_count == markets.mark_resolved.await_count


class TestMarketStats:
    async def test_stats(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.get_market_by_id.return_value = _market()
        db = AsyncMock()
        result = MagicMock()
        result.fetchone.return_value = MagicMock(
            total_trades=3, yes_shares=15, no_shares=4, total_volume=1005, unique_traders=2
        )
        db.execute.return_value = result

        stats = await svc.get_market_stats(db, "MKT-1")

        assert stats.total_trades == 3
        assert stats.yes_shares == 15
        assert stats.total_volume_display == "$10.05"
        assert stats.unique_traders == 2

    async def test_stats_missing_market(self, svc: AdminService, markets: AsyncMock) -> None:
        markets.get_market_by_id.return_value = None
        with pytest.raises(MarketNotFoundError):
            await svc.get_market_stats(AsyncMock(), "MKT-404")
