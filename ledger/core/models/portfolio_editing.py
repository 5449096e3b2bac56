"""
Snapshot editing operations.

Every operation takes a ``PortfolioSnapshot`` and returns a new one; the
input is never modified. Operations that reference an unknown symbol or
record id raise, leaving the caller's snapshot as it was.

Trades entered through these operations are replayed with
``OverSellPolicy.REJECT`` so a sell can never exceed the shares open at
its date once persisted.
"""

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date

from loguru import logger

from ledger.core.accounting.lot_ledger import compute_financials
from ledger.core.accounting.strategy_actuals import is_auto_strategy
from ledger.core.enums import OverSellPolicy
from ledger.core.exceptions.ledger import RecordNotFoundError
from ledger.core.utils.validation import validate_symbol

from .budget import BudgetEntry, Donation
from .dividend import Dividend
from .holding import Holding
from .metadata import InstrumentMetadata
from .price_history import PriceHistory, key_for_date
from .reference_catalog import catalog_name
from .snapshot import PortfolioSnapshot
from .strategy import Strategy
from .transaction import Transaction


def new_record_id() -> str:
    """Fresh unique id for a new record."""
    return str(uuid.uuid4())


def _validated(holding: Holding) -> Holding:
    compute_financials(holding, policy=OverSellPolicy.REJECT)
    return holding


def _replace_holding(snapshot: PortfolioSnapshot, holding: Holding) -> PortfolioSnapshot:
    return snapshot.evolve(
        holdings=tuple(holding if h.symbol == holding.symbol else h for h in snapshot.holdings)
    )


def _display_name(snapshot: PortfolioSnapshot, symbol: str) -> str:
    meta = snapshot.metadata.get(symbol)
    if meta is not None and meta.name:
        return meta.name
    return catalog_name(symbol) or symbol


# Transactions


def add_transaction(
    snapshot: PortfolioSnapshot,
    symbol: str,
    transaction: Transaction,
    name: str | None = None,
    current_price: float | None = None,
) -> PortfolioSnapshot:
    """Append a trade, creating the holding when the symbol is new.

    A new holding is named from ``name``, then the metadata, then the
    built-in catalog, and priced at ``current_price`` or the trade price.

    Raises:
        OverSellError: If the trade would sell more than is held
    """
    symbol = validate_symbol(symbol)
    holding = snapshot.find_holding(symbol)
    if holding is None:
        created = _validated(
            Holding(
                symbol=symbol,
                name=name or _display_name(snapshot, symbol),
                current_price=current_price if current_price is not None else transaction.price,
                transactions=(transaction,),
            )
        )
        logger.info(f"Created holding {symbol} with transaction {transaction.id}")
        return snapshot.evolve(holdings=(*snapshot.holdings, created))

    updated = holding.with_transaction(transaction)
    if current_price is not None:
        updated = updated.with_price(current_price)
    return _replace_holding(snapshot, _validated(updated))


def edit_transaction(
    snapshot: PortfolioSnapshot,
    symbol: str,
    transaction: Transaction,
    current_price: float | None = None,
) -> PortfolioSnapshot:
    """Replace the trade with the same id in place.

    Raises:
        SymbolNotFoundError: If the symbol is not held
        RecordNotFoundError: If the holding has no trade with that id
        OverSellError: If the edit would sell more than is held
    """
    holding = snapshot.get_holding(validate_symbol(symbol))
    updated = holding.replacing_transaction(transaction)
    if current_price is not None:
        updated = updated.with_price(current_price)
    return _replace_holding(snapshot, _validated(updated))


def delete_transaction(
    snapshot: PortfolioSnapshot, symbol: str, transaction_id: str
) -> PortfolioSnapshot:
    """Remove a trade from a holding's log.

    Raises:
        SymbolNotFoundError: If the symbol is not held
        RecordNotFoundError: If the holding has no trade with that id
        OverSellError: If removing a buy leaves a later sell uncovered
    """
    holding = snapshot.get_holding(validate_symbol(symbol))
    return _replace_holding(snapshot, _validated(holding.without_transaction(transaction_id)))


def delete_holding(snapshot: PortfolioSnapshot, symbol: str) -> PortfolioSnapshot:
    """Remove a holding with its whole transaction log.

    Raises:
        SymbolNotFoundError: If the symbol is not held
    """
    symbol = validate_symbol(symbol)
    snapshot.get_holding(symbol)
    return snapshot.evolve(holdings=tuple(h for h in snapshot.holdings if h.symbol != symbol))


# Records keyed by id


def _upsert(records: tuple, record) -> tuple:
    if any(r.id == record.id for r in records):
        return tuple(record if r.id == record.id else r for r in records)
    return (*records, record)


def _delete(records: tuple, record_id: str, kind: str) -> tuple:
    if not any(r.id == record_id for r in records):
        raise RecordNotFoundError(kind, record_id)
    return tuple(r for r in records if r.id != record_id)


def upsert_dividend(snapshot: PortfolioSnapshot, dividend: Dividend) -> PortfolioSnapshot:
    """Add a distribution, or replace the one with the same id."""
    return snapshot.evolve(dividends=_upsert(snapshot.dividends, dividend))


def delete_dividend(snapshot: PortfolioSnapshot, dividend_id: str) -> PortfolioSnapshot:
    return snapshot.evolve(dividends=_delete(snapshot.dividends, dividend_id, "Dividend"))


def upsert_donation(snapshot: PortfolioSnapshot, donation: Donation) -> PortfolioSnapshot:
    return snapshot.evolve(donations=_upsert(snapshot.donations, donation))


def delete_donation(snapshot: PortfolioSnapshot, donation_id: str) -> PortfolioSnapshot:
    return snapshot.evolve(donations=_delete(snapshot.donations, donation_id, "Donation"))


def upsert_budget_entry(snapshot: PortfolioSnapshot, entry: BudgetEntry) -> PortfolioSnapshot:
    return snapshot.evolve(budget_entries=_upsert(snapshot.budget_entries, entry))


def delete_budget_entry(snapshot: PortfolioSnapshot, entry_id: str) -> PortfolioSnapshot:
    return snapshot.evolve(
        budget_entries=_delete(snapshot.budget_entries, entry_id, "Budget entry")
    )


# Strategies


def upsert_strategy(snapshot: PortfolioSnapshot, strategy: Strategy) -> PortfolioSnapshot:
    """Save a strategy.

    Replaces the strategy with the same id, else the one targeting the
    same symbol (keeping its id), else appends. A generated lab strategy
    is stored under a fresh id.
    """
    strategies = list(snapshot.strategies)
    index = next((i for i, s in enumerate(strategies) if s.id == strategy.id), None)
    if index is None:
        index = next(
            (i for i, s in enumerate(strategies) if s.target_symbol == strategy.target_symbol),
            None,
        )
    if index is None:
        strategies.append(
            replace(strategy, id=new_record_id()) if is_auto_strategy(strategy) else strategy
        )
    else:
        strategies[index] = replace(strategy, id=strategies[index].id)
    return snapshot.evolve(strategies=tuple(strategies))


def delete_strategy(snapshot: PortfolioSnapshot, strategy_id: str) -> PortfolioSnapshot:
    return snapshot.evolve(strategies=_delete(snapshot.strategies, strategy_id, "Strategy"))


def reorder_strategies(
    snapshot: PortfolioSnapshot, strategies: Iterable[Strategy]
) -> PortfolioSnapshot:
    """Replace the stored strategies with ``strategies`` in the given order.

    Generated lab strategies (``auto-`` ids) are persisted under fresh ids.
    """
    ordered = tuple(
        replace(s, id=new_record_id()) if is_auto_strategy(s) else s for s in strategies
    )
    return snapshot.evolve(strategies=ordered)


# Reference data and prices


def save_metadata(snapshot: PortfolioSnapshot, meta: InstrumentMetadata) -> PortfolioSnapshot:
    return snapshot.evolve(metadata=snapshot.metadata.with_entry(meta))


def merge_historical_prices(
    snapshot: PortfolioSnapshot, prices: Iterable[tuple[str, str, float]]
) -> PortfolioSnapshot:
    """Merge ``(symbol, YYYY-MM, price)`` snapshots over the existing histories."""
    updates: dict[str, dict[str, float]] = {}
    for symbol, key, price in prices:
        updates.setdefault(validate_symbol(symbol), {})[key] = price

    histories = dict(snapshot.price_histories)
    for symbol, monthly in updates.items():
        existing = histories.get(symbol)
        histories[symbol] = (
            existing.with_prices(monthly) if existing else PriceHistory(symbol, monthly)
        )
    return snapshot.evolve(price_histories=histories)


def update_all_prices(
    snapshot: PortfolioSnapshot, prices: Mapping[str, float], today: date | None = None
) -> PortfolioSnapshot:
    """Set current prices and record them as this month's snapshot.

    Non-positive prices are ignored. Prices for symbols that are not held
    are still recorded in the price history.
    """
    valid = {validate_symbol(s): p for s, p in prices.items() if p and p > 0}
    holdings = tuple(
        h.with_price(valid[h.symbol]) if h.symbol in valid else h for h in snapshot.holdings
    )
    key = key_for_date(today or date.today())
    updated = merge_historical_prices(
        snapshot.evolve(holdings=holdings),
        ((symbol, key, price) for symbol, price in valid.items()),
    )
    logger.info(f"Updated prices for {len(valid)} symbols ({key})")
    return updated

