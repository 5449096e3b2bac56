"""
Unit tests for strategy actuals and generated lab strategies.
"""

from datetime import date

import pytest

from ledger.core.accounting.strategy_actuals import (
    auto_strategies,
    monthly_actuals,
    yearly_actual_stats,
)
from ledger.core.enums import TransactionType
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.reference_catalog import default_metadata
from ledger.core.models.strategy import ManualActual, Strategy
from ledger.core.models.transaction import Transaction


def _buy(tid: str, shares: float, day: date, fees: float = 0.0) -> Transaction:
    return Transaction(
        id=tid, type=TransactionType.BUY, shares=shares, price=20.0, date=day, fees=fees
    )


@pytest.fixture
def holding() -> Holding:
    return Holding(
        symbol="0056",
        name="High dividend",
        current_price=25.0,
        transactions=(
            _buy("b0", 500, date(2023, 6, 1)),
            _buy("b1", 1000, date(2024, 1, 10), fees=5.0),
            _buy("b2", 155, date(2024, 4, 15)),
        ),
    )


@pytest.fixture
def dividends() -> list[Dividend]:
    return [
        Dividend(id="d0", symbol="0056", amount=400.0, date=date(2023, 10, 20)),
        Dividend(id="d1", symbol="0056", amount=800.0, date=date(2024, 1, 20)),
        Dividend(id="d2", symbol="0056", amount=800.0, date=date(2024, 4, 20)),
        Dividend(id="d3", symbol="0050", amount=999.0, date=date(2024, 1, 20)),
    ]


class TestMonthlyActuals:
    """Tests for month-by-month real activity."""

    def test_should_split_buys_into_reinvested_and_extra(self, holding, dividends) -> None:
        """Test recorded dividends and buys per month."""
        strategy = Strategy(id="s", target_symbol="0056")

        rows = monthly_actuals(strategy, holding, dividends, 2024)

        assert len(rows) == 12
        assert rows[0].dividend_inflow == 800.0
        assert rows[0].total_buy == pytest.approx(20005.0)
        assert rows[0].reinvested == 800.0
        assert rows[0].extra == pytest.approx(19205.0)
        assert rows[3].extra == pytest.approx(2300.0)
        assert rows[5].total_buy == 0.0

    def test_should_prefer_manual_override(self, holding, dividends) -> None:
        """Test that a manual actual replaces recorded activity for its month."""
        strategy = Strategy(id="s", target_symbol="0056").with_manual_actual(
            2024, 4, ManualActual(dividend_inflow=0.0, total_buy=5000.0)
        )

        rows = monthly_actuals(strategy, holding, dividends, 2024)

        assert rows[3].is_manual
        assert rows[3].total_buy == 5000.0
        assert rows[3].dividend_inflow == 0.0

    def test_should_zero_months_without_holding(self, dividends) -> None:
        """Test a strategy whose instrument is not held."""
        rows = monthly_actuals(Strategy(id="s", target_symbol="0056"), None, dividends, 2024)

        assert all(r.dividend_inflow == 0.0 and r.total_buy == 0.0 for r in rows)


class TestYearlyActualStats:
    """Tests for yearly totals."""

    def test_should_sum_year_and_cumulative_figures(self, holding, dividends) -> None:
        """Test yearly totals and the return on cost."""
        strategy = Strategy(id="s", target_symbol="0056")

        stats = yearly_actual_stats(strategy, holding, dividends, 2024)

        assert stats.total_dividends == pytest.approx(1600.0)
        assert stats.reinvested_amount == pytest.approx(1600.0)
        assert stats.extra_capital == pytest.approx(21505.0)
        assert stats.annual_return == pytest.approx(1600.0 / 23105.0 * 100)
        assert stats.cumulative_dividends == pytest.approx(2000.0)
        assert stats.total_holding_cost == pytest.approx(33105.0)
        assert stats.cumulative_return == pytest.approx(2000.0 / 33105.0 * 100)


class TestAutoStrategies:
    """Tests for generated lab strategies."""

    def test_should_generate_for_uncovered_high_dividend_holdings(self, holding) -> None:
        """Test generation rules and ordering."""
        market_cap = Holding(
            "0050", "Taiwan 50", 150.0, (Transaction("c1", "BUY", 10, 100.0, date(2024, 1, 1)),)
        )
        no_yield = Holding(
            "00878", "ESG", 22.0, (Transaction("e1", "BUY", 100, 20.0, date(2024, 1, 1)),)
        )
        saved = Strategy(id="saved", target_symbol="00919")

        strategies = auto_strategies([holding, market_cap, no_yield], [saved], default_metadata())

        assert [s.id for s in strategies] == ["saved", "auto-0056", "auto-00878"]
        generated = strategies[1]
        assert generated.name == "0056 reinvestment plan"
        assert generated.initial_amount == pytest.approx(33105.0)
        assert generated.ex_div_extra_amount == 10000.0
        assert generated.expected_annual_return == 8.0
        assert generated.expected_dividend_yield == 8.0
        assert strategies[2].expected_dividend_yield == 5.0

    def test_should_skip_covered_and_sold_out_holdings(self) -> None:
        """Test that saved and closed instruments get no generated strategy."""
        sold = Holding(
            "00919",
            "Sold",
            22.0,
            (
                Transaction("b", "BUY", 10, 20.0, date(2024, 1, 1)),
                Transaction("s", "SELL", 10, 21.0, date(2024, 2, 1)),
            ),
        )

        assert auto_strategies([sold], [], default_metadata()) == []
