"""
Actual net-worth series and its overlay on projected growth.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.price_history import PriceHistory
from ledger.core.types.financial import ZERO
from ledger.core.utils.decorators import log_calculation

from .compound_simulator import BaselinePoint
from .lot_ledger import compute_financials
from .snapshot_reconstructor import period_cutoff, resolve_price_as_of


@dataclass(frozen=True)
class YearEndPosition:
    """Portfolio state at the end of one year."""

    year: int
    market_value: float
    cost: float
    cumulative_realized_pnl: float
    cumulative_dividends: float

    @property
    def unrealized_pnl(self) -> float:
        return self.market_value - self.cost

    @property
    def net_worth(self) -> float:
        return self.market_value + self.cumulative_realized_pnl + self.cumulative_dividends


@dataclass(frozen=True)
class NetWorthPoint:
    year: int
    market_value: float
    cost: float
    cumulative_realized_pnl: float
    cumulative_dividends: float
    net_worth: float
    adjusted_net_worth: float


@dataclass(frozen=True)
class OverlayPoint:
    year: int
    estimated: float
    actual: float | None = None


def year_end_position(
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    price_histories: dict[str, PriceHistory],
    year: int,
    as_of: date | None = None,
) -> YearEndPosition:
    """Reconstruct market value, cost and cumulative income at a year end."""
    cutoff = period_cutoff(year, as_of=as_of)
    market_value = cost = realized = ZERO
    for holding in holdings:
        truncated = holding.truncated(cutoff)
        if not truncated.transactions:
            continue
        price = resolve_price_as_of(holding, price_histories.get(holding.symbol), cutoff)
        financials = compute_financials(truncated, current_price=price)
        market_value += financials.market_value
        cost += financials.total_cost
        realized += financials.realized_pnl
    cumulative_dividends = sum(d.amount for d in dividends if d.date <= cutoff)
    return YearEndPosition(year, market_value, cost, realized, cumulative_dividends)


@log_calculation
def build_actual_series(
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    price_histories: dict[str, PriceHistory],
    start_year: int,
    as_of: date | None = None,
) -> list[NetWorthPoint]:
    """Year-end net worth from ``start_year`` up to the year of ``as_of``.

    Years before the first transaction are skipped. ``adjusted_net_worth``
    removes principal added after the start year, so it tracks the
    start-year principal plus every return earned since.
    """
    holdings = list(holdings)
    dividends = list(dividends)
    as_of = as_of or date.today()
    base = year_end_position(holdings, dividends, price_histories, start_year, as_of)

    points = []
    for year in range(start_year, as_of.year + 1):
        cutoff = period_cutoff(year, as_of=as_of)
        if not any(t.date <= cutoff for h in holdings for t in h.transactions):
            continue
        position = (
            base
            if year == start_year
            else year_end_position(holdings, dividends, price_histories, year, as_of)
        )
        points.append(
            NetWorthPoint(
                year=year,
                market_value=position.market_value,
                cost=position.cost,
                cumulative_realized_pnl=position.cumulative_realized_pnl,
                cumulative_dividends=position.cumulative_dividends,
                net_worth=position.net_worth,
                adjusted_net_worth=position.net_worth - (position.cost - base.cost),
            )
        )
    return points


def overlay_series(
    projected: Iterable[BaselinePoint],
    actual: Iterable[NetWorthPoint],
    adjusted: bool = True,
) -> list[OverlayPoint]:
    """Merge projected and actual values by year, following the projection's years."""
    actual_by_year = {
        p.year: (p.adjusted_net_worth if adjusted else p.net_worth) for p in actual
    }
    return [OverlayPoint(p.year, p.estimated, actual_by_year.get(p.year)) for p in projected]
