"""
Unit tests for financial helpers.
"""

import pytest

from ledger.core.types.financial import (
    ZERO,
    buy_cost,
    percentage,
    round_amount,
    round_percentage,
    round_shares,
    safe_divide,
    safe_float_comparison,
    sell_proceeds,
    to_float,
)


class TestSafeDivision:
    """Tests for guarded division helpers."""

    def test_should_divide_normally_when_denominator_non_zero(self) -> None:
        """Test plain division."""
        assert safe_divide(10.0, 4.0) == 2.5

    def test_should_return_zero_when_denominator_is_zero(self) -> None:
        """Test that a zero denominator never raises."""
        assert safe_divide(10.0, 0.0) == ZERO

    @pytest.mark.parametrize("denominator", [0.0, -50.0])
    def test_should_return_zero_percentage_for_non_positive_denominator(
        self, denominator: float
    ) -> None:
        """Test that only a positive base produces a percentage."""
        assert percentage(25.0, denominator) == ZERO

    def test_should_compute_percentage_of_positive_denominator(self) -> None:
        """Test percentage of a positive base."""
        assert percentage(25.0, 200.0) == pytest.approx(12.5)


class TestCashAmounts:
    """Tests for buy cost and sell proceeds."""

    def test_should_add_fees_to_buy_cost(self) -> None:
        """Test that fees increase the cost of a buy."""
        assert buy_cost(1000, 100.0, 15.0) == pytest.approx(100015.0)

    def test_should_subtract_fees_from_sell_proceeds(self) -> None:
        """Test that fees reduce the proceeds of a sell."""
        assert sell_proceeds(800, 120.0, 20.0) == pytest.approx(95980.0)


class TestConversionAndRounding:
    """Tests for conversion, rounding and comparison."""

    def test_should_convert_strings_and_ints(self) -> None:
        """Test numeric conversion."""
        assert to_float("1.5") == 1.5
        assert to_float(3) == 3.0

    def test_should_round_to_display_precision(self) -> None:
        """Test presentation rounding."""
        assert round_amount(1.23456) == 1.23
        assert round_percentage(12.3456) == 12.35
        assert round_shares(0.123456) == 0.1235

    def test_should_compare_floats_with_tolerance(self) -> None:
        """Test tolerant comparison."""
        assert safe_float_comparison(0.1 + 0.2, 0.3)
        assert not safe_float_comparison(1.0, 1.1)
        assert safe_float_comparison(1.0, 1.05, tolerance=0.1)
