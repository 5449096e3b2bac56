"""
Main Portfolio class - orchestrates the ledger components.

The facade owns the current ``PortfolioSnapshot`` and its repository. Writes
go through the pure editing operations under a lock and are persisted
before the new snapshot becomes current; a failed operation leaves both the
snapshot and the store untouched and is reported as an ``OperationResult``.
Reports are computed by the pure accounting engine and memoized by content
hash, so an unchanged snapshot is never recomputed.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from threading import RLock
from typing import Any

from loguru import logger

from ledger.core.accounting import (
    BudgetLedger,
    DividendGroup,
    HoldingFinancials,
    OverlayPoint,
    PeriodStatistics,
    ProjectionPoint,
    TotalReturnRow,
    YearlyActualStats,
    auto_strategies,
    build_actual_series,
    build_budget_ledger,
    build_dividend_groups,
    build_total_return_table,
    compute_financials,
    compute_period_statistics,
    overlay_series,
    project_baseline_growth,
    simulate_strategy,
    suggested_rates,
    yearly_actual_stats,
)
from ledger.core.accounting.net_worth import NetWorthPoint, year_end_position
from ledger.core.constants import (
    DEFAULT_BASELINE_PROJECTION_YEARS,
    DEFAULT_CALCULATION_CACHE_SIZE,
    DEFAULT_NET_WORTH_START_YEAR,
    DEFAULT_PROJECTION_YEARS,
)
from ledger.core.exceptions.ledger import (
    ImportFormatError,
    LedgerException,
    RecordNotFoundError,
)
from ledger.core.interfaces.repository import IPortfolioRepository, IPriceSource
from ledger.infrastructure.cache import CalculationCache
from ledger.infrastructure.parsing import (
    ParseError,
    parse_dividends,
    parse_donations,
    parse_historical_prices,
    parse_transactions,
)
from ledger.infrastructure.storage import export_backup, import_backup

from . import portfolio_editing as editing
from .budget import BudgetEntry, Donation
from .dividend import Dividend
from .metadata import InstrumentMetadata, MetadataMap
from .reference_catalog import default_metadata
from .snapshot import PortfolioSnapshot
from .strategy import ManualActual, Strategy
from .transaction import Transaction


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a write on the portfolio."""

    success: bool
    message: str
    snapshot: PortfolioSnapshot | None = None
    errors: tuple[str, ...] = ()


def _format_parse_errors(errors: Iterable[ParseError]) -> list[str]:
    return [f"Line {e.line}: {e.error}" for e in errors]


def _replace_snapshot(
    _current: PortfolioSnapshot, restored: PortfolioSnapshot
) -> PortfolioSnapshot:
    return restored


class Portfolio:
    """Stateful entry point over an immutable snapshot and its repository."""

    def __init__(
        self,
        repository: IPortfolioRepository,
        cache_size: int = DEFAULT_CALCULATION_CACHE_SIZE,
    ) -> None:
        self._repository = repository
        self._lock = RLock()
        self._cache = CalculationCache(cache_size)
        self._snapshot = repository.load()
        logger.info(f"Loaded portfolio with {len(self._snapshot.holdings)} holdings")

    @property
    def snapshot(self) -> PortfolioSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def metadata(self) -> MetadataMap:
        """Stored metadata layered over the built-in catalog."""
        return self.snapshot.metadata.merged_over(default_metadata())

    # Writes

    def _apply(
        self,
        message: str,
        operation: Callable[..., PortfolioSnapshot],
        *args: Any,
        **kwargs: Any,
    ) -> OperationResult:
        with self._lock:
            try:
                updated = operation(self._snapshot, *args, **kwargs)
                self._repository.save(updated)
            except LedgerException as e:
                logger.warning(f"{operation.__name__} failed: {e}")
                return OperationResult(success=False, message=str(e))
            self._snapshot = updated
        logger.debug(f"{operation.__name__}: {message}")
        return OperationResult(success=True, message=message, snapshot=updated)

    def add_transaction(
        self,
        symbol: str,
        transaction: Transaction,
        name: str | None = None,
        current_price: float | None = None,
    ) -> OperationResult:
        return self._apply(
            f"Added {transaction.type.value} of {symbol}",
            editing.add_transaction,
            symbol,
            transaction,
            name=name,
            current_price=current_price,
        )

    def edit_transaction(
        self, symbol: str, transaction: Transaction, current_price: float | None = None
    ) -> OperationResult:
        return self._apply(
            f"Updated transaction {transaction.id}",
            editing.edit_transaction,
            symbol,
            transaction,
            current_price=current_price,
        )

    def delete_transaction(self, symbol: str, transaction_id: str) -> OperationResult:
        return self._apply(
            f"Deleted transaction {transaction_id}",
            editing.delete_transaction,
            symbol,
            transaction_id,
        )

    def delete_holding(self, symbol: str) -> OperationResult:
        return self._apply(f"Deleted {symbol}", editing.delete_holding, symbol)

    def save_dividend(self, dividend: Dividend) -> OperationResult:
        return self._apply(f"Saved dividend {dividend.id}", editing.upsert_dividend, dividend)

    def delete_dividend(self, dividend_id: str) -> OperationResult:
        return self._apply(f"Deleted dividend {dividend_id}", editing.delete_dividend, dividend_id)

    def save_donation(self, donation: Donation) -> OperationResult:
        return self._apply(f"Saved donation {donation.id}", editing.upsert_donation, donation)

    def delete_donation(self, donation_id: str) -> OperationResult:
        return self._apply(f"Deleted donation {donation_id}", editing.delete_donation, donation_id)

    def save_budget_entry(self, entry: BudgetEntry) -> OperationResult:
        return self._apply(f"Saved budget entry {entry.id}", editing.upsert_budget_entry, entry)

    def delete_budget_entry(self, entry_id: str) -> OperationResult:
        return self._apply(
            f"Deleted budget entry {entry_id}", editing.delete_budget_entry, entry_id
        )

    def save_strategy(self, strategy: Strategy) -> OperationResult:
        return self._apply(f"Saved strategy {strategy.name}", editing.upsert_strategy, strategy)

    def delete_strategy(self, strategy_id: str) -> OperationResult:
        return self._apply(f"Deleted strategy {strategy_id}", editing.delete_strategy, strategy_id)

    def reorder_strategies(self, strategies: Iterable[Strategy]) -> OperationResult:
        return self._apply("Reordered strategies", editing.reorder_strategies, list(strategies))

    def set_manual_actual(
        self, strategy_id: str, year: int, month: int, actual: ManualActual | None
    ) -> OperationResult:
        """Override one month of a strategy's actuals; ``None`` removes the override."""
        strategy = self._find_lab_strategy(strategy_id)
        if strategy is None:
            return OperationResult(
                success=False, message=str(RecordNotFoundError("Strategy", strategy_id))
            )
        try:
            updated = (
                strategy.without_manual_actual(year, month)
                if actual is None
                else strategy.with_manual_actual(year, month, actual)
            )
        except LedgerException as e:
            return OperationResult(success=False, message=str(e))
        return self.save_strategy(updated)

    def save_metadata(self, meta: InstrumentMetadata) -> OperationResult:
        return self._apply(f"Saved metadata for {meta.symbol}", editing.save_metadata, meta)

    def merge_historical_prices(
        self, prices: Iterable[tuple[str, str, float]]
    ) -> OperationResult:
        return self._apply(
            "Merged historical prices", editing.merge_historical_prices, list(prices)
        )

    def update_prices(
        self, prices: Mapping[str, float], today: date | None = None
    ) -> OperationResult:
        return self._apply(
            f"Updated {len(prices)} prices", editing.update_all_prices, dict(prices), today=today
        )

    def update_prices_from(
        self, source: IPriceSource, today: date | None = None
    ) -> OperationResult:
        """Fetch prices for every held symbol and apply them."""
        symbols = self.snapshot.symbols
        try:
            prices = source.fetch_prices(symbols)
        except LedgerException as e:
            logger.warning(f"Price fetch failed: {e}")
            return OperationResult(success=False, message=str(e))
        missing = sorted(set(symbols) - set(prices))
        result = self.update_prices(prices, today=today)
        if result.success and missing:
            return OperationResult(
                success=True,
                message=result.message,
                snapshot=result.snapshot,
                errors=tuple(f"No price for {symbol}" for symbol in missing),
            )
        return result

    # Bulk text imports

    def import_transactions_text(self, text: str) -> OperationResult:
        """Apply every valid transaction line in order.

        Lines that fail to parse, or whose trade would over-sell, are
        reported in ``errors`` and skipped; the remaining lines are applied.
        """
        parsed = parse_transactions(text)
        errors = _format_parse_errors(parsed.errors)
        with self._lock:
            working = self._snapshot
            applied = 0
            for item in parsed.success:
                try:
                    working = editing.add_transaction(working, item.symbol, item.transaction)
                    applied += 1
                except LedgerException as e:
                    errors.append(f"{item.symbol}: {e}")
            return self._commit_import(working, f"Imported {applied} transactions", errors)

    def import_dividends_text(self, text: str) -> OperationResult:
        parsed = parse_dividends(text)
        with self._lock:
            working = self._snapshot
            for dividend in parsed.success:
                working = editing.upsert_dividend(working, dividend)
            return self._commit_import(
                working,
                f"Imported {len(parsed.success)} dividends",
                _format_parse_errors(parsed.errors),
            )

    def import_donations_text(self, text: str) -> OperationResult:
        parsed = parse_donations(text)
        with self._lock:
            working = self._snapshot
            for donation in parsed.success:
                working = editing.upsert_donation(working, donation)
            return self._commit_import(
                working,
                f"Imported {len(parsed.success)} donations",
                _format_parse_errors(parsed.errors),
            )

    def import_prices_text(self, text: str) -> OperationResult:
        parsed = parse_historical_prices(text)
        with self._lock:
            working = editing.merge_historical_prices(
                self._snapshot, ((q.symbol, q.year_month, q.price) for q in parsed.success)
            )
            return self._commit_import(
                working,
                f"Imported {len(parsed.success)} monthly prices",
                _format_parse_errors(parsed.errors),
            )

    def _commit_import(
        self, working: PortfolioSnapshot, message: str, errors: list[str]
    ) -> OperationResult:
        if working is not self._snapshot:
            try:
                self._repository.save(working)
            except LedgerException as e:
                logger.error(f"Saving imported records failed: {e}")
                return OperationResult(success=False, message=str(e), errors=tuple(errors))
            self._snapshot = working
        logger.info(f"{message} ({len(errors)} errors)")
        return OperationResult(
            success=True, message=message, snapshot=self._snapshot, errors=tuple(errors)
        )

    # Backup

    def export_backup(self, export_date: datetime | None = None) -> dict[str, Any]:
        return export_backup(self.snapshot, export_date)

    def import_backup(self, data: Mapping[str, Any] | str | bytes) -> OperationResult:
        """Replace the whole portfolio with a backup document."""
        try:
            restored = import_backup(data)
        except ImportFormatError as e:
            return OperationResult(success=False, message=str(e), errors=tuple(e.details))
        return self._apply("Restored backup", _replace_snapshot, restored)

    # Reports

    def _compute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return self._cache.get_or_compute(func, *args, **kwargs)

    def holding_financials(self, symbol: str) -> HoldingFinancials:
        """Lot-ledger figures of one holding.

        Raises:
            SymbolNotFoundError: If the symbol is not held
        """
        return self._compute(compute_financials, self.snapshot.get_holding(symbol))

    def all_financials(self) -> list[HoldingFinancials]:
        return [self._compute(compute_financials, h) for h in self.snapshot.holdings]

    def period_statistics(
        self,
        year: int | None = None,
        month: int | None = None,
        as_of: date | None = None,
        symbols: Iterable[str] | None = None,
    ) -> PeriodStatistics:
        snapshot = self.snapshot
        return self._compute(
            compute_period_statistics,
            snapshot.holdings,
            snapshot.dividends,
            snapshot.price_histories,
            year=year,
            month=month,
            as_of=as_of or date.today(),
            symbols=tuple(symbols) if symbols is not None else None,
            metadata=self.metadata,
        )

    def dividend_groups(
        self, year: int | None = None, held_only: bool = False, search: str = ""
    ) -> list[DividendGroup]:
        snapshot = self.snapshot
        return self._compute(
            build_dividend_groups,
            snapshot.holdings,
            snapshot.dividends,
            self.metadata,
            year=year,
            held_only=held_only,
            search=search,
        )

    def budget_ledger(self) -> BudgetLedger:
        snapshot = self.snapshot
        return self._compute(
            build_budget_ledger,
            snapshot.budget_entries,
            snapshot.holdings,
            snapshot.dividends,
            snapshot.donations,
        )

    def total_return_table(
        self,
        active_only: bool = True,
        search: str = "",
        sort_by: str = "symbol",
        descending: bool = False,
    ) -> list[TotalReturnRow]:
        snapshot = self.snapshot
        return self._compute(
            build_total_return_table,
            snapshot.holdings,
            snapshot.dividends,
            active_only=active_only,
            search=search,
            sort_by=sort_by,
            descending=descending,
        )

    def lab_strategies(self) -> list[Strategy]:
        """Saved strategies followed by generated ones for held high-dividend instruments."""
        snapshot = self.snapshot
        return self._compute(auto_strategies, snapshot.holdings, snapshot.strategies, self.metadata)

    def _find_lab_strategy(self, strategy_id: str) -> Strategy | None:
        return next((s for s in self.lab_strategies() if s.id == strategy_id), None)

    def get_strategy(self, strategy_id: str) -> Strategy:
        """Saved or generated strategy by id.

        Raises:
            RecordNotFoundError: If no lab strategy has that id
        """
        strategy = self._find_lab_strategy(strategy_id)
        if strategy is None:
            raise RecordNotFoundError("Strategy", strategy_id)
        return strategy

    def project_strategy(
        self,
        strategy_id: str,
        start_year: int | None = None,
        years: int = DEFAULT_PROJECTION_YEARS,
    ) -> list[ProjectionPoint]:
        strategy = self.get_strategy(strategy_id)
        return self._compute(
            simulate_strategy,
            strategy,
            self.metadata.get(strategy.target_symbol),
            start_year if start_year is not None else date.today().year,
            years=years,
        )

    def strategy_actuals(self, strategy_id: str, year: int) -> YearlyActualStats:
        strategy = self.get_strategy(strategy_id)
        snapshot = self.snapshot
        return self._compute(
            yearly_actual_stats,
            strategy,
            snapshot.find_holding(strategy.target_symbol),
            snapshot.dividends,
            year,
        )

    def net_worth_series(
        self, start_year: int = DEFAULT_NET_WORTH_START_YEAR, as_of: date | None = None
    ) -> list[NetWorthPoint]:
        snapshot = self.snapshot
        return self._compute(
            build_actual_series,
            snapshot.holdings,
            snapshot.dividends,
            snapshot.price_histories,
            start_year,
            as_of=as_of or date.today(),
        )

    def net_worth_overlay(
        self,
        start_year: int = DEFAULT_NET_WORTH_START_YEAR,
        years: int = DEFAULT_BASELINE_PROJECTION_YEARS,
        expected_pnl_rate: float | None = None,
        expected_dividend_rate: float | None = None,
        adjusted: bool = True,
        as_of: date | None = None,
    ) -> list[OverlayPoint]:
        """Baseline projection of the start-year principal against the actual series.

        Rates left unset default to the all-time unrealized P&L rate and
        dividend yield (see ``suggested_rates``).
        """
        as_of = as_of or date.today()
        if expected_pnl_rate is None or expected_dividend_rate is None:
            stats = self.period_statistics(as_of=as_of)
            pnl_rate, dividend_rate = suggested_rates(
                stats.unrealized_pnl_rate, stats.dividend_yield
            )
            expected_pnl_rate = pnl_rate if expected_pnl_rate is None else expected_pnl_rate
            expected_dividend_rate = (
                dividend_rate if expected_dividend_rate is None else expected_dividend_rate
            )

        snapshot = self.snapshot
        base = year_end_position(
            snapshot.holdings, snapshot.dividends, snapshot.price_histories, start_year, as_of
        )
        projected = project_baseline_growth(
            base.cost,
            base.cumulative_dividends,
            start_year,
            years=years,
            expected_pnl_rate=expected_pnl_rate,
            expected_dividend_rate=expected_dividend_rate,
        )
        return overlay_series(projected, self.net_worth_series(start_year, as_of), adjusted)

    def cache_stats(self) -> dict[str, Any]:
        return self._cache.get_stats()
