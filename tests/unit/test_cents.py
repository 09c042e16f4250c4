"""Tests for pm_common.cents: integer arithmetic utilities."""

import pytest

from src.pm_common.cents import cents_to_display, price_to_display, trade_cost, validate_price


class TestValidatePrice:
    def test_valid_prices(self) -> None:
        for p in [1, 50, 99]:
            validate_price(p)  # Should not raise

    def test_zero_raises(self) -> None:
        with pytest.raises(ValueError, match=r"1.*99"):
            validate_price(0)

    def test_hundred_raises(self) -> None:
        with pytest.raises(ValueError, match=r"1.*99"):
            validate_price(100)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match=r"1.*99"):
            validate_price(-5)


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(450) == "$4.50"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_one_cent(self) -> None:
        assert cents_to_display(1) == "$0.01"

    def test_thousands_separator(self) -> None:
        assert cents_to_display(100000) == "$1,000.00"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"


class TestPriceToDisplay:
    def test_cents_sign(self) -> None:
        assert price_to_display(55) == "55¢"


class TestTradeCost:
    def test_shares_times_price(self) -> None:
        assert trade_cost(55, 10) == 550

    def test_single_share(self) -> None:
        assert trade_cost(1, 1) == 1
