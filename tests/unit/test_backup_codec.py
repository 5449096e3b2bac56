"""
Unit tests for the backup codec.
"""

import json
from datetime import UTC, date, datetime

import pytest

from ledger.core.enums import BudgetEntryType, Currency
from ledger.core.exceptions.ledger import ImportFormatError
from ledger.core.models.budget import BudgetEntry, Donation
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import InstrumentMetadata, MetadataMap
from ledger.core.models.price_history import PriceHistory
from ledger.core.models.settings import Settings
from ledger.core.models.snapshot import PortfolioSnapshot
from ledger.core.models.strategy import ManualActual, Strategy
from ledger.core.models.transaction import Transaction
from ledger.infrastructure.storage import dumps_backup, export_backup, import_backup

EXPORTED_AT = datetime(2024, 6, 30, 12, 0, tzinfo=UTC)


@pytest.fixture
def snapshot() -> PortfolioSnapshot:
    holding = Holding(
        "0056",
        "High dividend",
        36.5,
        (
            Transaction("t1", "BUY", 1000, 35.0, date(2024, 1, 15), fees=20.0),
            Transaction("t2", "SELL", 200, 37.0, date(2024, 3, 1), fees=12.0),
        ),
    )
    strategy = Strategy(
        id="s1",
        target_symbol="0056",
        name="Quarterly",
        initial_amount=100000.0,
        monthly_amount=5000.0,
        expected_annual_return=6.0,
        expected_dividend_yield=7.5,
    ).with_manual_actual(2024, 4, ManualActual(dividend_inflow=710.0, total_buy=5000.0))
    return PortfolioSnapshot(
        holdings=(holding,),
        dividends=(
            Dividend(
                "d1", "0056", 710.0, date(2024, 1, 20), shares_held=1000, dividend_per_share=0.72
            ),
        ),
        donations=(Donation("g1", 300.0, date(2024, 2, 1), "Food bank"),),
        budget_entries=(BudgetEntry("b1", BudgetEntryType.DEPOSIT, 50000.0, date(2024, 1, 1)),),
        price_histories={"0056": PriceHistory("0056", {"2024-01": 35.2, "2024-02": 36.0})},
        strategies=(strategy,),
        settings=Settings(currency=Currency.USD, transaction_fee_rate=0.001),
        metadata=MetadataMap.from_records(
            [
                InstrumentMetadata(
                    "0056",
                    name="High dividend",
                    category="高股息",
                    frequency=4,
                    ex_div_months=(1, 4, 7, 10),
                )
            ]
        ),
    )


class TestExportBackup:
    """Tests for the exported document."""

    def test_should_use_camel_case_keys(self, snapshot) -> None:
        """Test the wire format."""
        document = export_backup(snapshot, EXPORTED_AT)

        assert set(document) >= {
            "stocks",
            "dividends",
            "donations",
            "budgetEntries",
            "historicalPrices",
            "strategies",
            "settings",
            "stockMetadata",
            "exportDate",
        }
        assert document["stocks"][0]["currentPrice"] == 36.5
        assert document["stocks"][0]["transactions"][0]["date"] == "2024-01-15"
        assert document["dividends"][0]["stockSymbol"] == "0056"
        assert document["strategies"][0]["manualActuals"] == {
            "2024": {"4": {"divInflow": 710.0, "totalBuy": 5000.0}}
        }
        assert document["stockMetadata"]["0056"]["type"] == "高股息"
        assert document["exportDate"] == "2024-06-30T12:00:00+00:00"

    def test_should_omit_unset_optional_fields(self) -> None:
        """Test that None values are left out."""
        snapshot = PortfolioSnapshot(
            dividends=(Dividend("d", "0050", 100.0, date(2024, 1, 20)),),
            strategies=(Strategy(id="s", target_symbol="0050"),),
        )

        document = export_backup(snapshot, EXPORTED_AT)

        assert "sharesHeld" not in document["dividends"][0]
        assert "manualActuals" not in document["strategies"][0]


class TestImportBackup:
    """Tests for parsing backup documents."""

    def test_should_reproduce_exported_snapshot(self, snapshot) -> None:
        """Test that export then import gives back an equal snapshot."""
        assert import_backup(dumps_backup(snapshot, EXPORTED_AT)) == snapshot
        assert import_backup(export_backup(snapshot, EXPORTED_AT)) == snapshot

    def test_should_default_optional_collections(self) -> None:
        """Test a minimal document."""
        restored = import_backup({"stocks": [], "dividends": [], "donations": []})

        assert restored == PortfolioSnapshot()

    def test_should_ignore_unknown_keys(self) -> None:
        """Test forward compatibility."""
        restored = import_backup(
            {"stocks": [], "dividends": [], "donations": [], "theme": "dark", "version": 7}
        )

        assert restored.holdings == ()

    def test_should_reject_missing_required_collection(self) -> None:
        """Test that a required key is reported in the details."""
        with pytest.raises(ImportFormatError) as exc:
            import_backup({"stocks": [], "dividends": []})

        assert exc.value.details == ["donations: Field required"]

    def test_should_reject_invalid_record(self) -> None:
        """Test a field-level error inside a collection."""
        document = {
            "stocks": [
                {
                    "symbol": "0056",
                    "transactions": [
                        {"id": "t", "type": "BUY", "shares": -1, "price": 1, "date": "2024-01-01"}
                    ],
                }
            ],
            "dividends": [],
            "donations": [],
        }

        with pytest.raises(ImportFormatError) as exc:
            import_backup(document)

        assert exc.value.details[0].startswith("stocks.0.transactions.0.shares")

    def test_should_reject_domain_rule_violation(self) -> None:
        """Test duplicate transaction ids in one holding."""
        trade = {"id": "t", "type": "BUY", "shares": 1, "price": 1, "date": "2024-01-01"}
        document = {
            "stocks": [{"symbol": "0056", "transactions": [trade, trade]}],
            "dividends": [],
            "donations": [],
        }

        with pytest.raises(ImportFormatError, match="Duplicate transaction id"):
            import_backup(document)

    @pytest.mark.parametrize("data", ["not json", "[1, 2]", json.dumps({"stocks": 3})])
    def test_should_reject_malformed_text(self, data: str) -> None:
        """Test malformed JSON text."""
        with pytest.raises(ImportFormatError, match="Malformed backup file"):
            import_backup(data)

    def test_should_reject_non_mapping_input(self) -> None:
        """Test a decoded value that is not an object."""
        with pytest.raises(ImportFormatError, match="expected a JSON object, got list"):
            import_backup([1, 2])

    @pytest.mark.parametrize("field", ["shares", "price", "fees"])
    def test_should_reject_non_finite_trade_amounts(self, field: str) -> None:
        """Test that infinite amounts fail field validation."""
        trade = {"id": "t", "type": "BUY", "shares": 1, "price": 1, "date": "2024-01-01"}
        document = {
            "stocks": [{"symbol": "0056", "transactions": [{**trade, field: float("inf")}]}],
            "dividends": [],
            "donations": [],
        }

        with pytest.raises(ImportFormatError) as exc:
            import_backup(document)

        assert exc.value.details[0].startswith(f"stocks.0.transactions.0.{field}")

    def test_should_reject_infinity_in_json_text(self) -> None:
        """Test the non-standard Infinity literal in backup text."""
        text = (
            '{"stocks": [{"symbol": "0056", "transactions": [{"id": "t", "type": "BUY", '
            '"shares": Infinity, "price": 1, "date": "2024-01-01"}]}], '
            '"dividends": [], "donations": []}'
        )

        with pytest.raises(ImportFormatError):
            import_backup(text)
