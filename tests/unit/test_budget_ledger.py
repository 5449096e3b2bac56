"""
Unit tests for the Budget Ledger.
"""

from datetime import date

import pytest

from ledger.core.accounting.budget_ledger import build_budget_ledger
from ledger.core.enums import BudgetEntryType, LedgerSource, TransactionType
from ledger.core.models.budget import BudgetEntry, Donation
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.transaction import Transaction


def _records():
    deposit = BudgetEntry("m1", BudgetEntryType.DEPOSIT, 100000.0, date(2024, 1, 1), "Salary")
    holding = Holding(
        "0056",
        "High dividend",
        30.0,
        (Transaction("t1", TransactionType.BUY, 1000, 20.0, date(2024, 1, 5), fees=10.0),),
    )
    dividend = Dividend(id="d1", symbol="0056", amount=800.0, date=date(2024, 2, 1))
    donation = Donation("g1", 300.0, date(2024, 3, 1), "Food bank")
    return [deposit], [holding], [dividend], [donation]


class TestBuildBudgetLedger:
    """Tests for the running-balance cash ledger."""

    def test_should_fold_all_sources_into_running_balance(self) -> None:
        """Test balances after each row."""
        ledger = build_budget_ledger(*_records())

        assert [row.source for row in ledger.rows] == [
            LedgerSource.MANUAL,
            LedgerSource.STOCK,
            LedgerSource.DIVIDEND,
            LedgerSource.DONATION,
        ]
        assert [row.balance for row in ledger.rows] == pytest.approx(
            [100000.0, 79990.0, 80790.0, 80490.0]
        )
        assert ledger.final_balance == pytest.approx(80490.0)
        assert ledger.total_inflow == pytest.approx(100800.0)
        assert ledger.total_outflow == pytest.approx(20310.0)

    def test_should_describe_derived_rows(self) -> None:
        """Test row descriptions and editability."""
        ledger = build_budget_ledger(*_records())

        assert ledger.rows[1].description == "Buy 0056 High dividend"
        assert ledger.rows[2].description == "Dividend 0056"
        assert ledger.rows[3].description == "Donation: Food bank"
        assert [row.editable for row in ledger.rows] == [True, False, False, False]

    def test_should_not_depend_on_entry_order(self) -> None:
        """Test that records entered out of order give the same balance."""
        entries, holdings, dividends, donations = _records()
        late_deposit = BudgetEntry("m0", "WITHDRAWAL", 90.0, date(2023, 12, 31))

        ledger = build_budget_ledger([*entries, late_deposit], holdings, dividends, donations)

        assert ledger.rows[0].id == "m0"
        assert ledger.rows[0].balance == pytest.approx(-90.0)
        assert ledger.final_balance == pytest.approx(80400.0)

    def test_should_credit_sell_proceeds_net_of_fees(self) -> None:
        """Test that a sell is an inflow of its net proceeds."""
        holding = Holding(
            "0050",
            "",
            100.0,
            (
                Transaction("b", TransactionType.BUY, 10, 100.0, date(2024, 1, 1)),
                Transaction("s", TransactionType.SELL, 10, 110.0, date(2024, 2, 1), fees=5.0),
            ),
        )

        ledger = build_budget_ledger([], [holding], [], [])

        assert ledger.rows[1].description == "Sell 0050"
        assert ledger.rows[1].inflow == pytest.approx(1095.0)
        assert ledger.final_balance == pytest.approx(95.0)

    def test_should_filter_rows_by_source_newest_first(self) -> None:
        """Test source filtering."""
        ledger = build_budget_ledger(*_records())

        assert [row.id for row in ledger.filter_source("all")] == ["g1", "d1", "t1", "m1"]
        assert [row.id for row in ledger.filter_source(LedgerSource.DIVIDEND)] == ["d1"]
        assert [row.id for row in ledger.filter_source("manual")] == ["m1"]

    def test_should_return_empty_ledger_without_records(self) -> None:
        """Test the empty case."""
        ledger = build_budget_ledger([], [], [], [])

        assert ledger.rows == ()
        assert ledger.final_balance == 0.0
