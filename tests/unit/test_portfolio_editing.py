"""
Unit tests for snapshot editing operations.
"""

from datetime import date

import pytest

from ledger.core.enums import TransactionType
from ledger.core.exceptions.ledger import (
    OverSellError,
    RecordNotFoundError,
    SymbolNotFoundError,
)
from ledger.core.models import portfolio_editing as editing
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import InstrumentMetadata, MetadataMap
from ledger.core.models.snapshot import PortfolioSnapshot
from ledger.core.models.strategy import Strategy
from ledger.core.models.transaction import Transaction


def _trade(tid: str, kind: TransactionType, shares: float, day: date) -> Transaction:
    return Transaction(id=tid, type=kind, shares=shares, price=30.0, date=day)


def _snapshot() -> PortfolioSnapshot:
    holding = Holding(
        symbol="0056",
        name="High dividend",
        current_price=35.0,
        transactions=(
            _trade("b1", TransactionType.BUY, 100, date(2024, 1, 1)),
            _trade("s1", TransactionType.SELL, 60, date(2024, 3, 1)),
        ),
    )
    return PortfolioSnapshot(holdings=(holding,))


class TestTransactionEditing:
    """Tests for trade add, edit and delete."""

    def test_should_create_holding_named_from_catalog(self) -> None:
        """Test that a new symbol becomes a holding named by the catalog."""
        snapshot = PortfolioSnapshot()
        trade = _trade("b1", TransactionType.BUY, 10, date(2024, 1, 1))

        updated = editing.add_transaction(snapshot, "00919", trade)

        holding = updated.get_holding("00919")
        assert holding.name == "群益台灣精選高息"
        assert holding.current_price == 30.0
        assert snapshot.holdings == ()

    def test_should_prefer_explicit_name_and_metadata_name(self) -> None:
        """Test naming precedence for new holdings."""
        snapshot = PortfolioSnapshot(
            metadata=MetadataMap.from_records([InstrumentMetadata("AAPL", name="Apple")])
        )
        trade = _trade("b1", TransactionType.BUY, 1, date(2024, 1, 1))

        from_metadata = editing.add_transaction(snapshot, "aapl", trade)
        explicit = editing.add_transaction(snapshot, "AAPL", trade, name="Mine", current_price=99)

        assert from_metadata.get_holding("AAPL").name == "Apple"
        assert explicit.get_holding("AAPL").name == "Mine"
        assert explicit.get_holding("AAPL").current_price == 99

    def test_should_append_to_existing_holding(self) -> None:
        """Test appending a trade and updating the price."""
        trade = _trade("b2", TransactionType.BUY, 5, date(2024, 4, 1))

        updated = editing.add_transaction(_snapshot(), "0056", trade, current_price=36.0)

        holding = updated.get_holding("0056")
        assert [t.id for t in holding.transactions] == ["b1", "s1", "b2"]
        assert holding.current_price == 36.0

    def test_should_reject_sell_beyond_open_shares(self) -> None:
        """Test that an over-sell is refused and the input is untouched."""
        snapshot = _snapshot()
        trade = _trade("s2", TransactionType.SELL, 50, date(2024, 4, 1))

        with pytest.raises(OverSellError, match="only 40 held"):
            editing.add_transaction(snapshot, "0056", trade)

        assert len(snapshot.get_holding("0056").transactions) == 2

    def test_should_reject_edit_that_uncovers_later_sell(self) -> None:
        """Test that shrinking a buy below a later sell is refused."""
        smaller = _trade("b1", TransactionType.BUY, 50, date(2024, 1, 1))

        with pytest.raises(OverSellError):
            editing.edit_transaction(_snapshot(), "0056", smaller)

    def test_should_edit_transaction_in_place(self) -> None:
        """Test that an edit keeps log position."""
        larger = _trade("b1", TransactionType.BUY, 200, date(2024, 1, 1))

        updated = editing.edit_transaction(_snapshot(), "0056", larger)

        assert updated.get_holding("0056").transactions[0].shares == 200

    def test_should_reject_deleting_buy_backing_a_sell(self) -> None:
        """Test that deleting the only buy before a sell is refused."""
        with pytest.raises(OverSellError):
            editing.delete_transaction(_snapshot(), "0056", "b1")

    def test_should_raise_for_unknown_symbol_or_record(self) -> None:
        """Test lookup failures."""
        with pytest.raises(SymbolNotFoundError):
            editing.delete_transaction(_snapshot(), "0050", "b1")
        with pytest.raises(RecordNotFoundError):
            editing.delete_transaction(_snapshot(), "0056", "missing")

    def test_should_delete_holding(self) -> None:
        """Test removing a whole holding."""
        assert editing.delete_holding(_snapshot(), "0056").holdings == ()
        with pytest.raises(SymbolNotFoundError):
            editing.delete_holding(PortfolioSnapshot(), "0056")


class TestRecordEditing:
    """Tests for id-keyed record upserts."""

    def test_should_insert_then_replace_dividend(self) -> None:
        """Test dividend upsert by id."""
        first = Dividend(id="d1", symbol="0056", amount=100.0, date=date(2024, 1, 20))
        second = Dividend(id="d1", symbol="0056", amount=150.0, date=date(2024, 1, 20))

        snapshot = editing.upsert_dividend(PortfolioSnapshot(), first)
        snapshot = editing.upsert_dividend(snapshot, second)

        assert len(snapshot.dividends) == 1
        assert snapshot.dividends[0].amount == 150.0

    def test_should_raise_when_deleting_missing_record(self) -> None:
        """Test delete of unknown ids."""
        with pytest.raises(RecordNotFoundError, match="Dividend not found: d9"):
            editing.delete_dividend(PortfolioSnapshot(), "d9")
        with pytest.raises(RecordNotFoundError, match="Budget entry not found"):
            editing.delete_budget_entry(PortfolioSnapshot(), "b9")


class TestStrategyEditing:
    """Tests for strategy persistence rules."""

    def test_should_replace_strategy_targeting_same_symbol(self) -> None:
        """Test that a second strategy for a symbol replaces the first and keeps its id."""
        saved = editing.upsert_strategy(
            PortfolioSnapshot(), Strategy(id="s1", target_symbol="0056", monthly_amount=1000)
        )

        updated = editing.upsert_strategy(
            saved, Strategy(id="other", target_symbol="0056", monthly_amount=2000)
        )

        assert len(updated.strategies) == 1
        assert updated.strategies[0].id == "s1"
        assert updated.strategies[0].monthly_amount == 2000

    def test_should_store_generated_strategy_under_fresh_id(self) -> None:
        """Test that auto ids are not persisted."""
        updated = editing.upsert_strategy(
            PortfolioSnapshot(), Strategy(id="auto-0056", target_symbol="0056")
        )

        assert not updated.strategies[0].id.startswith("auto-")

    def test_should_reorder_strategies(self) -> None:
        """Test replacing the stored order."""
        a = Strategy(id="a", target_symbol="0056")
        b = Strategy(id="b", target_symbol="0050")
        snapshot = PortfolioSnapshot(strategies=(a, b))

        reordered = editing.reorder_strategies(snapshot, [b, a])

        assert [s.id for s in reordered.strategies] == ["b", "a"]
        with pytest.raises(RecordNotFoundError):
            editing.delete_strategy(reordered, "c")


class TestPriceEditing:
    """Tests for price updates and history merges."""

    def test_should_merge_snapshots_over_existing_history(self) -> None:
        """Test history merge keeps other months."""
        snapshot = editing.merge_historical_prices(
            PortfolioSnapshot(), [("0056", "2024-01", 30.0), ("0056", "2024-02", 31.0)]
        )

        merged = editing.merge_historical_prices(snapshot, [("0056", "2024-02", 32.0)])

        assert merged.price_histories["0056"].prices == {"2024-01": 30.0, "2024-02": 32.0}

    def test_should_update_current_prices_and_record_month(self) -> None:
        """Test that valid prices update holdings and this month's snapshot."""
        updated = editing.update_all_prices(
            _snapshot(), {"0056": 38.0, "0050": 150.0, "00919": 0.0}, today=date(2024, 5, 15)
        )

        assert updated.get_holding("0056").current_price == 38.0
        assert updated.price_histories["0056"].price_for("2024-05") == 38.0
        assert updated.price_histories["0050"].price_for("2024-05") == 150.0
        assert "00919" not in updated.price_histories
