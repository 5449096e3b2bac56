"""
Per-instrument total return: unrealized profit plus all dividend income.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ledger.core.exceptions.ledger import ValidationError
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.types.financial import percentage
from ledger.core.utils.decorators import log_calculation

from .lot_ledger import HoldingFinancials, compute_financials

SORT_KEYS = frozenset(
    {"symbol", "name", "dividend_income", "total_pnl", "return_rate", "total_cost", "market_value"}
)


@dataclass(frozen=True)
class TotalReturnRow:
    symbol: str
    name: str
    financials: HoldingFinancials
    dividend_income: float
    total_pnl: float
    return_rate: float

    @property
    def total_cost(self) -> float:
        return self.financials.total_cost

    @property
    def market_value(self) -> float:
        return self.financials.market_value


@log_calculation
def build_total_return_table(
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    active_only: bool = True,
    search: str = "",
    sort_by: str = "symbol",
    descending: bool = False,
) -> list[TotalReturnRow]:
    """Build the total-return table.

    Args:
        holdings: Portfolio holdings
        dividends: All recorded distributions
        active_only: Keep only instruments with shares still held
        search: Case-insensitive substring matched against symbol or name
        sort_by: Row attribute to sort on
        descending: Reverse the sort

    Returns:
        Rows sorted on ``sort_by``

    Raises:
        ValidationError: If ``sort_by`` is not a sortable column
    """
    if sort_by not in SORT_KEYS:
        raise ValidationError(f"Cannot sort total return table by {sort_by!r}")
    needle = search.strip().lower()
    income: dict[str, float] = {}
    for dividend in dividends:
        income[dividend.symbol] = income.get(dividend.symbol, 0.0) + dividend.amount

    rows = []
    for holding in holdings:
        if needle and needle not in holding.symbol.lower() and needle not in holding.name.lower():
            continue
        financials = compute_financials(holding)
        if active_only and not financials.is_held:
            continue
        dividend_income = income.get(holding.symbol, 0.0)
        total_pnl = financials.unrealized_pnl + dividend_income
        rows.append(
            TotalReturnRow(
                symbol=holding.symbol,
                name=holding.name,
                financials=financials,
                dividend_income=dividend_income,
                total_pnl=total_pnl,
                return_rate=percentage(total_pnl, financials.total_cost),
            )
        )
    rows.sort(key=lambda row: getattr(row, sort_by), reverse=descending)
    return rows
