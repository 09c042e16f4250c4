"""Unit tests for pm_market schemas and domain helpers."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.pm_market.application.schemas import (
    CreateMarketRequest,
    cursor_decode,
    cursor_encode,
)
from src.pm_market.domain.models import Market


def _make_market(**kwargs) -> Market:
    defaults = dict(
        id="MKT-1", title="Test", description=None, category=None,
        closes_at=None, status="open", outcome=None, yes_price=55, no_price=45,
        resolved_at=None, created_at=datetime(2026, 3, 1, tzinfo=UTC),
        updated_at=datetime(2026, 3, 1, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return Market(**defaults)


class TestCreateMarketRequest:
    def test_defaults(self) -> None:
        req = CreateMarketRequest(title="Will it rain?")
        assert req.yes_price == 55
        assert req.no_price == 45

    def test_blank_description_and_category_become_null(self) -> None:
        req = CreateMarketRequest(title="T", description="   ", category="")
        new = req.to_domain()
        assert new.description is None
        assert new.category is None

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMarketRequest(title="   ")

    def test_price_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMarketRequest(title="T", yes_price=100)
        with pytest.raises(ValidationError):
            CreateMarketRequest(title="T", no_price=0)

    def test_prices_need_not_sum_to_100(self) -> None:
        req = CreateMarketRequest(title="T", yes_price=70, no_price=70)
        assert (req.yes_price, req.no_price) == (70, 70)


class TestCursor:
    def test_round_trip(self) -> None:
        ts, market_id = cursor_decode(cursor_encode(_make_market(id="MKT-9")))
        assert market_id == "MKT-9"
        assert datetime.fromisoformat(ts) == datetime(2026, 3, 1, tzinfo=UTC)

    def test_garbage_cursor_is_ignored(self) -> None:
        assert cursor_decode("not-base64!!") == (None, None)
        assert cursor_decode(None) == (None, None)


class TestMarketModel:
    def test_price_for_side(self) -> None:
        m = _make_market(yes_price=62, no_price=40)
        assert m.price_for("yes") == 62
        assert m.price_for("no") == 40

    def test_status_flags(self) -> None:
        assert _make_market(status="open").is_open
        assert not _make_market(status="closed").is_open
        assert _make_market(status="resolved", outcome="resolved_no").is_resolved
