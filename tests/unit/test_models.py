"""
Unit tests for ledger domain models.
"""

from datetime import date

import pytest

from ledger.core.enums import BudgetEntryType, Currency, InstrumentCategory, TransactionType
from ledger.core.exceptions.ledger import RecordNotFoundError, ValidationError
from ledger.core.models.budget import BudgetEntry, Donation
from ledger.core.models.dividend import Dividend, net_dividend_amount
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import InstrumentMetadata, MetadataMap, parse_category
from ledger.core.models.price_history import PriceHistory, key_for_date, year_month_key
from ledger.core.models.reference_catalog import catalog_name, default_metadata
from ledger.core.models.settings import Settings
from ledger.core.models.strategy import ManualActual, Strategy
from ledger.core.models.transaction import Transaction


def _buy(tid: str = "t1", day: date = date(2024, 1, 1)) -> Transaction:
    return Transaction(id=tid, type=TransactionType.BUY, shares=10, price=50.0, date=day)


class TestTransaction:
    """Tests for the Transaction model."""

    def test_should_coerce_type_and_date(self) -> None:
        """Test that string inputs are normalized."""
        transaction = Transaction(id="t", type="sell", shares=5, price=10.0, date="2024-02-03")

        assert transaction.type is TransactionType.SELL
        assert transaction.date == date(2024, 2, 3)

    @pytest.mark.parametrize(
        ("shares", "price", "fees", "message"),
        [
            (0, 10.0, 0.0, "Shares must be positive"),
            (1, -1.0, 0.0, "Price must be non-negative"),
            (1, 10.0, -5.0, "Fees must be non-negative"),
        ],
    )
    def test_should_reject_invalid_amounts(self, shares, price, fees, message) -> None:
        """Test amount validation."""
        with pytest.raises(ValidationError, match=message):
            Transaction("t", TransactionType.BUY, shares, price, date(2024, 1, 1), fees=fees)

    def test_should_compute_cash_amount_by_direction(self) -> None:
        """Test that fees add to buys and reduce sells."""
        buy = Transaction("b", TransactionType.BUY, 10, 100.0, date(2024, 1, 1), fees=5.0)
        sell = Transaction("s", TransactionType.SELL, 10, 100.0, date(2024, 1, 1), fees=5.0)

        assert buy.notional_value() == 1000.0
        assert buy.cash_amount() == 1005.0
        assert sell.cash_amount() == 995.0


class TestHolding:
    """Tests for the Holding model."""

    def test_should_normalize_symbol_and_freeze_log(self) -> None:
        """Test post-init normalization."""
        holding = Holding(symbol=" 0056 ", name="x", current_price=30.0, transactions=[_buy()])

        assert holding.symbol == "0056"
        assert isinstance(holding.transactions, tuple)

    def test_should_reject_duplicate_transaction_ids(self) -> None:
        """Test id uniqueness within a holding."""
        with pytest.raises(ValidationError, match="Duplicate transaction id t1"):
            Holding("0056", "x", 30.0, (_buy("t1"), _buy("t1")))

    def test_should_edit_log_by_value(self) -> None:
        """Test append, replace and remove return new holdings."""
        holding = Holding("0056", "x", 30.0, (_buy("t1"),))
        edited = Transaction("t1", TransactionType.BUY, 20, 40.0, date(2024, 1, 5))

        appended = holding.with_transaction(_buy("t2"))
        replaced = appended.replacing_transaction(edited)
        removed = replaced.without_transaction("t2")

        assert len(holding.transactions) == 1
        assert [t.id for t in appended.transactions] == ["t1", "t2"]
        assert replaced.find_transaction("t1").shares == 20
        assert [t.id for t in removed.transactions] == ["t1"]

    def test_should_raise_for_unknown_transaction(self) -> None:
        """Test lookup of a missing id."""
        holding = Holding("0056", "x", 30.0, (_buy(),))

        with pytest.raises(RecordNotFoundError, match="Transaction not found: nope"):
            holding.without_transaction("nope")

    def test_should_truncate_log_at_cutoff(self) -> None:
        """Test truncation keeps trades dated on or before the cutoff."""
        holding = Holding(
            "0056", "x", 30.0, (_buy("a", date(2023, 5, 1)), _buy("b", date(2024, 5, 1)))
        )

        assert [t.id for t in holding.truncated(date(2023, 12, 31)).transactions] == ["a"]
        assert holding.transaction_years() == {2023, 2024}


class TestDividendAndCash:
    """Tests for dividends, budget entries and donations."""

    def test_should_compute_net_dividend_amount(self) -> None:
        """Test remittance fee deduction and flooring."""
        assert net_dividend_amount(1000, 0.72) == 710.0
        assert net_dividend_amount(5, 1.0) == 0.0
        assert net_dividend_amount(1000, 0.755) == 745.0

    def test_should_default_effective_shares_to_zero(self) -> None:
        """Test missing shares held."""
        dividend = Dividend(id="d", symbol="0056", amount=100.0, date="2024-01-20")

        assert dividend.effective_shares == 0.0
        assert dividend.date == date(2024, 1, 20)

    def test_should_split_budget_entry_into_inflow_and_outflow(self) -> None:
        """Test budget entry direction."""
        deposit = BudgetEntry("b1", "deposit", 500.0, date(2024, 1, 1))
        withdrawal = BudgetEntry("b2", BudgetEntryType.WITHDRAWAL, 200.0, date(2024, 1, 2))

        assert deposit.type is BudgetEntryType.DEPOSIT
        assert (deposit.inflow, deposit.outflow) == (500.0, 0.0)
        assert (withdrawal.inflow, withdrawal.outflow) == (0.0, 200.0)

    def test_should_reject_unknown_budget_type(self) -> None:
        """Test invalid budget entry kind."""
        with pytest.raises(ValidationError, match="Invalid budget entry type"):
            BudgetEntry("b", "transfer", 1.0, date(2024, 1, 1))

    def test_should_require_positive_donation(self) -> None:
        """Test donation amount validation."""
        with pytest.raises(ValidationError, match="Donation amount must be positive"):
            Donation("d", 0.0, date(2024, 1, 1), "charity")


class TestPriceHistory:
    """Tests for monthly price snapshots."""

    @pytest.fixture
    def history(self) -> PriceHistory:
        return PriceHistory("0050", {"2023-12": 130.0, "2024-03": 150.0, "2024-01": 140.0})

    def test_should_build_canonical_keys(self) -> None:
        """Test key formatting."""
        assert year_month_key(2024, 3) == "2024-03"
        assert key_for_date(date(2024, 11, 30)) == "2024-11"

    def test_should_resolve_exact_and_earlier_snapshots(self, history) -> None:
        """Test lookups by key."""
        assert history.price_for("2024-01") == 140.0
        assert history.price_for("2024-02") is None
        assert history.latest_at_or_before("2024-02") == 140.0
        assert history.latest_at_or_before("2023-01") is None
        assert history.latest() == 150.0

    def test_should_merge_updates_without_mutating(self, history) -> None:
        """Test with_prices."""
        updated = history.with_prices({"2024-03": 155.0, "2024-04": 160.0})

        assert updated.price_for("2024-03") == 155.0
        assert history.price_for("2024-03") == 150.0

    def test_should_reject_malformed_key(self) -> None:
        """Test key validation."""
        with pytest.raises(ValidationError):
            PriceHistory("0050", {"2024-3": 1.0})


class TestMetadata:
    """Tests for instrument metadata."""

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("high-dividend", InstrumentCategory.HIGH_DIVIDEND),
            ("高股息", InstrumentCategory.HIGH_DIVIDEND),
            (" Market-Cap ", InstrumentCategory.MARKET_CAP),
            ("something else", InstrumentCategory.OTHER),
        ],
    )
    def test_should_parse_category_labels(self, label, expected) -> None:
        """Test category alias mapping."""
        assert parse_category(label) is expected

    def test_should_validate_frequency_range(self) -> None:
        """Test that frequency must be between 1 and 12."""
        with pytest.raises(ValidationError, match="between 1 and 12"):
            InstrumentMetadata("0056", frequency=0)

    def test_should_sort_months(self) -> None:
        """Test month normalization."""
        meta = InstrumentMetadata("0056", ex_div_months=[10, 1, 7, 4])

        assert meta.ex_div_months == (1, 4, 7, 10)
        assert meta.is_ex_dividend_month(7)

    def test_should_reject_duplicate_records(self) -> None:
        """Test duplicate detection in from_records."""
        with pytest.raises(ValidationError, match="Duplicate metadata"):
            MetadataMap.from_records([InstrumentMetadata("0056"), InstrumentMetadata("0056")])

    def test_should_default_unknown_frequency(self) -> None:
        """Test frequency fallback for unknown symbols."""
        metadata = MetadataMap.from_records([InstrumentMetadata("0056", frequency=4)])

        assert metadata.frequency_for("0056") == 4
        assert metadata.frequency_for("9999") == 1

    def test_should_override_base_entries_when_merged(self) -> None:
        """Test merged_over precedence."""
        own = MetadataMap.from_records([InstrumentMetadata("0056", name="Mine", frequency=2)])

        merged = own.merged_over(default_metadata())

        assert merged.get("0056").name == "Mine"
        assert merged.get("00919").is_high_dividend

    def test_should_provide_reference_catalog(self) -> None:
        """Test the built-in catalog."""
        catalog = default_metadata()

        assert catalog.get("0056").ex_div_months == (1, 4, 7, 10)
        assert catalog.get("0056").default_yield == 8.0
        assert not catalog.get("0050").is_high_dividend
        assert catalog_name(" 0056 ") == "元大高股息"
        assert catalog_name("9999") is None


class TestStrategy:
    """Tests for Strategy and manual actuals."""

    def test_should_reject_return_at_or_below_minus_hundred(self) -> None:
        """Test expected return bound."""
        with pytest.raises(ValidationError, match="above -100"):
            Strategy(id="s", target_symbol="0056", expected_annual_return=-100)

    def test_should_set_and_remove_manual_actuals(self) -> None:
        """Test sparse manual override editing."""
        strategy = Strategy(id="s", target_symbol="0056")
        actual = ManualActual(dividend_inflow=500.0, total_buy=1000.0)

        with_actual = strategy.with_manual_actual(2024, 3, actual)
        cleared = with_actual.without_manual_actual(2024, 3)

        assert strategy.manual_actual_for(2024, 3) is None
        assert with_actual.manual_actual_for(2024, 3) == actual
        assert cleared.manual_actuals == {}

    def test_should_reject_negative_manual_actual(self) -> None:
        """Test manual actual validation."""
        with pytest.raises(ValidationError):
            ManualActual(dividend_inflow=-1.0)


class TestSettings:
    """Tests for user settings."""

    def test_should_suggest_floored_fees(self) -> None:
        """Test default fee with tax on sells."""
        settings = Settings()

        assert settings.default_fee(TransactionType.BUY, 1000, 100.0) == 142.0
        assert settings.default_fee(TransactionType.SELL, 1000, 100.0) == 242.0

    def test_should_format_amount_in_home_currency(self) -> None:
        """Test currency formatting."""
        assert Settings().format_amount(1234.4) == "TWD 1,234"
        assert Settings(currency=Currency.USD).format_amount(1234.5) == "USD 1,234.50"

    def test_should_reject_fee_rate_out_of_range(self) -> None:
        """Test fee rate bounds."""
        with pytest.raises(ValidationError, match="Transaction fee rate"):
            Settings(transaction_fee_rate=1.5)
