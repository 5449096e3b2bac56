"""
Dividend yield and annualization.

Groups distributions by instrument and expresses each one as a yield on
the cost of the shares that received it. That cost is
``shares_held * current average cost``: it uses today's cost basis, not
the basis at the distribution date, so historical yields move whenever the
position is traded.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from ledger.core.constants import DEFAULT_DIVIDEND_FREQUENCY
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import MetadataMap
from ledger.core.types.financial import ZERO, percentage, safe_divide
from ledger.core.utils.decorators import log_calculation

from .lot_ledger import HoldingFinancials, compute_financials


@dataclass(frozen=True)
class DividendDetail:
    """One distribution with its yield figures."""

    dividend: Dividend
    proportional_cost: float
    yield_rate: float
    annualized_yield: float


@dataclass(frozen=True)
class DividendGroup:
    """All distributions of one instrument."""

    symbol: str
    name: str
    total_amount: float
    yield_rate: float
    average_annualized_yield: float
    current_shares: float
    current_total_cost: float
    frequency: int
    details: tuple[DividendDetail, ...]

    @property
    def is_held(self) -> bool:
        return self.current_shares > ZERO


def annualize(yield_rate: float, frequency: int) -> float:
    """Extrapolate a single distribution's yield to a yearly rate."""
    return yield_rate * frequency


def summarize_instrument_dividends(
    symbol: str,
    dividends: Iterable[Dividend],
    financials: HoldingFinancials | None,
    frequency: int = DEFAULT_DIVIDEND_FREQUENCY,
    name: str = "",
) -> DividendGroup:
    """Build the yield summary of one instrument's distributions.

    Args:
        symbol: Instrument symbol
        dividends: Distributions of that instrument
        financials: Lot Ledger output for the holding, or None when the
            symbol is not in the portfolio (all cost figures are then 0)
        frequency: Declared payouts per year
        name: Display name

    Returns:
        DividendGroup with details sorted newest first
    """
    average_cost = financials.average_cost if financials else ZERO
    total_cost = financials.total_cost if financials else ZERO
    current_shares = financials.current_shares if financials else ZERO

    details: list[DividendDetail] = []
    for dividend in dividends:
        proportional_cost = dividend.effective_shares * average_cost
        yield_rate = percentage(dividend.amount, proportional_cost)
        details.append(
            DividendDetail(
                dividend=dividend,
                proportional_cost=proportional_cost,
                yield_rate=yield_rate,
                annualized_yield=annualize(yield_rate, frequency),
            )
        )

    total_amount = sum(d.dividend.amount for d in details)
    details.sort(key=lambda d: d.dividend.date, reverse=True)
    return DividendGroup(
        symbol=symbol,
        name=name,
        total_amount=total_amount,
        yield_rate=percentage(total_amount, total_cost),
        average_annualized_yield=safe_divide(
            sum(d.annualized_yield for d in details), len(details)
        ),
        current_shares=current_shares,
        current_total_cost=total_cost,
        frequency=frequency,
        details=tuple(details),
    )


@log_calculation
def build_dividend_groups(
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    metadata: MetadataMap,
    year: int | None = None,
    held_only: bool = False,
    search: str = "",
) -> list[DividendGroup]:
    """Group distributions by instrument with yield figures.

    Args:
        holdings: Portfolio holdings, used for cost basis and names
        dividends: All recorded distributions
        metadata: Instrument metadata supplying payout frequencies
        year: Only consider distributions dated in this year
        held_only: Drop instruments no longer held
        search: Case-insensitive symbol substring filter

    Returns:
        Groups in order of each symbol's first distribution
    """
    by_symbol = {holding.symbol: holding for holding in holdings}
    needle = search.strip().lower()

    grouped: dict[str, list[Dividend]] = {}
    for dividend in dividends:
        if year is not None and dividend.date.year != year:
            continue
        if needle and needle not in dividend.symbol.lower():
            continue
        grouped.setdefault(dividend.symbol, []).append(dividend)

    groups = []
    for symbol, items in grouped.items():
        holding = by_symbol.get(symbol)
        financials = compute_financials(holding) if holding else None
        groups.append(
            summarize_instrument_dividends(
                symbol,
                items,
                financials,
                frequency=metadata.frequency_for(symbol),
                name=holding.name if holding else "",
            )
        )

    if held_only:
        groups = [g for g in groups if g.is_held]
    return groups
