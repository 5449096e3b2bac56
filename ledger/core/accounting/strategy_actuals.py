"""
Real-world activity of a strategy's instrument, month by month.

A month's figures come from a manual override when the strategy has one,
otherwise from the recorded distributions and buys of that month.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ledger.core.constants import (
    AUTO_STRATEGY_ANNUAL_RETURN,
    AUTO_STRATEGY_DEFAULT_YIELD,
    AUTO_STRATEGY_EX_DIV_EXTRA,
    AUTO_STRATEGY_ID_PREFIX,
    MONTHS_PER_YEAR,
)
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import MetadataMap
from ledger.core.models.strategy import Strategy
from ledger.core.types.financial import ZERO, percentage
from ledger.core.utils.decorators import log_calculation

from .lot_ledger import compute_financials


@dataclass(frozen=True)
class MonthlyActual:
    month: int
    dividend_inflow: float
    total_buy: float
    is_manual: bool = False

    @property
    def reinvested(self) -> float:
        """Part of the month's buys funded by the month's dividends."""
        return min(self.dividend_inflow, self.total_buy)

    @property
    def extra(self) -> float:
        """Part of the month's buys funded by new money."""
        return max(ZERO, self.total_buy - self.dividend_inflow)


@dataclass(frozen=True)
class YearlyActualStats:
    year: int
    total_dividends: float
    reinvested_amount: float
    extra_capital: float
    annual_return: float
    cumulative_dividends: float
    total_holding_cost: float
    cumulative_return: float
    rows: tuple[MonthlyActual, ...] = ()


def is_auto_strategy(strategy: Strategy) -> bool:
    return strategy.id.startswith(AUTO_STRATEGY_ID_PREFIX)


@log_calculation
def monthly_actuals(
    strategy: Strategy,
    holding: Holding | None,
    dividends: Iterable[Dividend],
    year: int,
) -> list[MonthlyActual]:
    """Twelve monthly rows for ``year``.

    Without a holding for the target symbol, months without an override
    are all zero.
    """
    symbol = strategy.target_symbol
    own_dividends = [d for d in dividends if d.symbol == symbol and d.date.year == year]
    buys = [t for t in holding.transactions if t.is_buy and t.date.year == year] if holding else []

    rows = []
    for month in range(1, MONTHS_PER_YEAR + 1):
        manual = strategy.manual_actual_for(year, month)
        if manual is not None:
            rows.append(MonthlyActual(month, manual.dividend_inflow, manual.total_buy, True))
        elif holding is None:
            rows.append(MonthlyActual(month, ZERO, ZERO))
        else:
            rows.append(
                MonthlyActual(
                    month,
                    sum(d.amount for d in own_dividends if d.date.month == month),
                    sum(t.cash_amount() for t in buys if t.date.month == month),
                )
            )
    return rows


def yearly_actual_stats(
    strategy: Strategy,
    holding: Holding | None,
    dividends: Iterable[Dividend],
    year: int,
) -> YearlyActualStats:
    """Yearly totals of the monthly rows plus the all-time dividend return on cost."""
    dividends = list(dividends)
    rows = monthly_actuals(strategy, holding, dividends, year)
    total_dividends = sum(r.dividend_inflow for r in rows)
    reinvested = sum(r.reinvested for r in rows)
    extra = sum(r.extra for r in rows)

    holding_cost = compute_financials(holding).total_cost if holding else ZERO
    cumulative = sum(d.amount for d in dividends if d.symbol == strategy.target_symbol)
    return YearlyActualStats(
        year=year,
        total_dividends=total_dividends,
        reinvested_amount=reinvested,
        extra_capital=extra,
        annual_return=percentage(total_dividends, reinvested + extra),
        cumulative_dividends=cumulative,
        total_holding_cost=holding_cost,
        cumulative_return=percentage(cumulative, holding_cost),
        rows=tuple(rows),
    )


@log_calculation
def auto_strategies(
    holdings: Iterable[Holding],
    strategies: Iterable[Strategy],
    metadata: MetadataMap,
) -> list[Strategy]:
    """Strategies shown in the lab.

    Saved strategies come first in their stored order, followed by a
    generated strategy for each held high-dividend instrument that has
    none, in holding order.
    """
    strategies = list(strategies)
    covered = {s.target_symbol for s in strategies}
    generated = []
    for holding in holdings:
        meta = metadata.get(holding.symbol)
        if holding.symbol in covered or meta is None or not meta.is_high_dividend:
            continue
        financials = compute_financials(holding)
        if not financials.is_held:
            continue
        generated.append(
            Strategy(
                id=f"{AUTO_STRATEGY_ID_PREFIX}{holding.symbol}",
                name=f"{holding.symbol} reinvestment plan",
                target_symbol=holding.symbol,
                initial_amount=financials.total_cost,
                monthly_amount=ZERO,
                ex_div_extra_amount=AUTO_STRATEGY_EX_DIV_EXTRA,
                reinvest=True,
                expected_annual_return=AUTO_STRATEGY_ANNUAL_RETURN,
                expected_dividend_yield=(
                    meta.default_yield
                    if meta.default_yield is not None
                    else AUTO_STRATEGY_DEFAULT_YIELD
                ),
            )
        )
    return strategies + generated
