"""
Backup codec: ``PortfolioSnapshot`` <-> backup JSON document.

Export then import reproduces the snapshot exactly. A document that does
not match the backup contract is rejected as a whole with
``ImportFormatError``; nothing is partially applied.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ledger.core.exceptions.ledger import ImportFormatError, LedgerException
from ledger.core.models.budget import BudgetEntry, Donation
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import InstrumentMetadata, MetadataMap
from ledger.core.models.price_history import PriceHistory
from ledger.core.models.settings import Settings
from ledger.core.models.snapshot import PortfolioSnapshot
from ledger.core.models.strategy import ManualActual, Strategy
from ledger.core.models.transaction import Transaction

from .backup_schemas import (
    BackupDocument,
    BudgetEntryRecord,
    DividendRecord,
    DonationRecord,
    HistoricalPriceRecord,
    ManualActualRecord,
    MetadataRecord,
    SettingsRecord,
    StockRecord,
    StrategyRecord,
    TransactionRecord,
)

# Domain -> document


def _stock_record(holding: Holding) -> StockRecord:
    return StockRecord(
        symbol=holding.symbol,
        name=holding.name,
        current_price=holding.current_price,
        transactions=[
            TransactionRecord(
                id=t.id, type=t.type, shares=t.shares, price=t.price, date=t.date, fees=t.fees
            )
            for t in holding.transactions
        ],
    )


def _strategy_record(strategy: Strategy) -> StrategyRecord:
    manual = {
        str(year): {
            str(month): ManualActualRecord(
                div_inflow=actual.dividend_inflow, total_buy=actual.total_buy
            )
            for month, actual in months.items()
        }
        for year, months in strategy.manual_actuals.items()
    }
    return StrategyRecord(
        id=strategy.id,
        name=strategy.name,
        target_symbol=strategy.target_symbol,
        initial_amount=strategy.initial_amount,
        monthly_amount=strategy.monthly_amount,
        ex_div_extra_amount=strategy.ex_div_extra_amount,
        reinvest=strategy.reinvest,
        expected_annual_return=strategy.expected_annual_return,
        expected_dividend_yield=strategy.expected_dividend_yield,
        manual_actuals=manual or None,
    )


def _metadata_record(meta: InstrumentMetadata) -> MetadataRecord:
    return MetadataRecord(
        name=meta.name,
        market=meta.market,
        category=meta.category,
        industry=meta.industry,
        frequency=meta.frequency,
        ex_div_months=list(meta.ex_div_months),
        pay_months=list(meta.pay_months),
        default_yield=meta.default_yield,
        payout_label=meta.payout_label,
    )


def snapshot_to_document(
    snapshot: PortfolioSnapshot, export_date: datetime | None = None
) -> BackupDocument:
    """Convert a snapshot into its backup document."""
    settings = snapshot.settings
    return BackupDocument(
        stocks=[_stock_record(h) for h in snapshot.holdings],
        dividends=[
            DividendRecord(
                id=d.id,
                stock_symbol=d.symbol,
                amount=d.amount,
                date=d.date,
                shares_held=d.shares_held,
                dividend_per_share=d.dividend_per_share,
            )
            for d in snapshot.dividends
        ],
        donations=[
            DonationRecord(id=d.id, amount=d.amount, date=d.date, description=d.description)
            for d in snapshot.donations
        ],
        budget_entries=[
            BudgetEntryRecord(
                id=e.id, type=e.type, amount=e.amount, date=e.date, description=e.description
            )
            for e in snapshot.budget_entries
        ],
        historical_prices=[
            HistoricalPriceRecord(stock_symbol=h.symbol, prices=dict(h.prices))
            for h in snapshot.price_histories.values()
        ],
        strategies=[_strategy_record(s) for s in snapshot.strategies],
        settings=SettingsRecord(
            currency=settings.currency,
            transaction_fee_rate=settings.transaction_fee_rate,
            tax_rate=settings.tax_rate,
            display_mode=settings.display_mode,
        ),
        stock_metadata={meta.symbol: _metadata_record(meta) for meta in snapshot.metadata},
        export_date=(export_date or datetime.now(UTC)).isoformat(),
    )


# Document -> domain


def _holding(record: StockRecord) -> Holding:
    return Holding(
        symbol=record.symbol,
        name=record.name,
        current_price=record.current_price,
        transactions=tuple(
            Transaction(
                id=t.id, type=t.type, shares=t.shares, price=t.price, date=t.date, fees=t.fees
            )
            for t in record.transactions
        ),
    )


def _strategy(record: StrategyRecord) -> Strategy:
    manual: dict[int, dict[int, ManualActual]] = {}
    for year, months in (record.manual_actuals or {}).items():
        manual[int(year)] = {
            int(month): ManualActual(dividend_inflow=a.div_inflow, total_buy=a.total_buy)
            for month, a in months.items()
        }
    return Strategy(
        id=record.id,
        name=record.name,
        target_symbol=record.target_symbol,
        initial_amount=record.initial_amount,
        monthly_amount=record.monthly_amount,
        ex_div_extra_amount=record.ex_div_extra_amount,
        reinvest=record.reinvest,
        expected_annual_return=record.expected_annual_return,
        expected_dividend_yield=record.expected_dividend_yield,
        manual_actuals=manual,
    )


def _metadata(symbol: str, record: MetadataRecord) -> InstrumentMetadata:
    return InstrumentMetadata(
        symbol=symbol,
        name=record.name,
        market=record.market,
        category=record.category,
        industry=record.industry,
        frequency=record.frequency,
        ex_div_months=tuple(record.ex_div_months),
        pay_months=tuple(record.pay_months),
        default_yield=record.default_yield,
        payout_label=record.payout_label,
    )


def document_to_snapshot(document: BackupDocument) -> PortfolioSnapshot:
    """Convert a validated backup document into a snapshot.

    Raises:
        ImportFormatError: If the records violate a domain rule
    """
    try:
        settings = document.settings or SettingsRecord()
        histories = [
            PriceHistory(symbol=h.stock_symbol, prices=dict(h.prices))
            for h in document.historical_prices
        ]
        return PortfolioSnapshot(
            holdings=tuple(_holding(s) for s in document.stocks),
            dividends=tuple(
                Dividend(
                    id=d.id,
                    symbol=d.stock_symbol,
                    amount=d.amount,
                    date=d.date,
                    shares_held=d.shares_held,
                    dividend_per_share=d.dividend_per_share,
                )
                for d in document.dividends
            ),
            donations=tuple(
                Donation(id=d.id, amount=d.amount, date=d.date, description=d.description)
                for d in document.donations
            ),
            budget_entries=tuple(
                BudgetEntry(
                    id=e.id, type=e.type, amount=e.amount, date=e.date, description=e.description
                )
                for e in document.budget_entries
            ),
            price_histories={h.symbol: h for h in histories},
            strategies=tuple(_strategy(s) for s in document.strategies),
            settings=Settings(
                currency=settings.currency,
                transaction_fee_rate=settings.transaction_fee_rate,
                tax_rate=settings.tax_rate,
                display_mode=settings.display_mode,
            ),
            metadata=MetadataMap.from_records(
                _metadata(symbol, record) for symbol, record in document.stock_metadata.items()
            ),
        )
    except (LedgerException, ValueError) as e:
        raise ImportFormatError(str(e)) from e


def _error_details(error: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    ]


def export_backup(
    snapshot: PortfolioSnapshot, export_date: datetime | None = None
) -> dict[str, Any]:
    """JSON-ready backup dictionary of ``snapshot``."""
    return snapshot_to_document(snapshot, export_date).model_dump(
        mode="json", by_alias=True, exclude_none=True
    )


def dumps_backup(snapshot: PortfolioSnapshot, export_date: datetime | None = None) -> str:
    """Serialize ``snapshot`` to backup JSON text."""
    document = snapshot_to_document(snapshot, export_date)
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def import_backup(data: Mapping[str, Any] | str | bytes) -> PortfolioSnapshot:
    """Parse backup JSON text or an already-decoded mapping.

    Raises:
        ImportFormatError: If the document is malformed
    """
    try:
        if isinstance(data, str | bytes):
            document = BackupDocument.model_validate_json(data)
        elif isinstance(data, Mapping):
            document = BackupDocument.model_validate(dict(data))
        else:
            raise ImportFormatError(f"expected a JSON object, got {type(data).__name__}")
    except PydanticValidationError as e:
        details = _error_details(e)
        logger.warning(f"Rejected backup document with {len(details)} errors")
        raise ImportFormatError("document does not match the backup format", details) from e

    snapshot = document_to_snapshot(document)
    logger.info(
        f"Imported backup: {len(snapshot.holdings)} holdings, "
        f"{len(snapshot.dividends)} dividends, {len(snapshot.donations)} donations"
    )
    return snapshot
