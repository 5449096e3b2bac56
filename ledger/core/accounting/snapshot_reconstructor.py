"""
Historical Snapshot Reconstructor.

Recomputes portfolio figures as they stood at the end of a past period by
truncating every transaction log at a cutoff date and valuing the
remaining shares against the monthly price snapshots.

Realized profit for a period is NOT taken from the truncated replay:
the full log is replayed once and the sells dated inside the period are
summed, so that realized figures per year add up to the all-time total.
"""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from ledger.core.constants import CONTRIBUTION_RANK_SIZE
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.models.metadata import MetadataMap
from ledger.core.models.price_history import PriceHistory, key_for_date
from ledger.core.types.financial import ZERO, percentage
from ledger.core.utils.decorators import log_calculation
from ledger.core.utils.validation import validate_month

from .dividend_yield import summarize_instrument_dividends
from .lot_ledger import HoldingFinancials, compute_financials, sorted_transactions


@dataclass(frozen=True)
class InstrumentContribution:
    """How one held instrument contributed to the period."""

    symbol: str
    unrealized_pnl_percent: float
    total_return_with_dividends_percent: float
    average_annualized_yield: float


@dataclass(frozen=True)
class RankedValue:
    symbol: str
    value: float


@dataclass(frozen=True)
class ContributionRankings:
    """Top and bottom instruments for each contribution measure."""

    top_pnl: tuple[RankedValue, ...] = ()
    bottom_pnl: tuple[RankedValue, ...] = ()
    top_total_return: tuple[RankedValue, ...] = ()
    bottom_total_return: tuple[RankedValue, ...] = ()
    top_yield: tuple[RankedValue, ...] = ()
    bottom_yield: tuple[RankedValue, ...] = ()


@dataclass(frozen=True)
class PeriodHolding:
    """An instrument held at the cutoff, valued at its resolved price."""

    symbol: str
    name: str
    price: float
    financials: HoldingFinancials


@dataclass(frozen=True)
class PeriodStatistics:
    """Portfolio figures for one period (or all time when ``year`` is None)."""

    year: int | None
    month: int | None
    cutoff: date | None
    market_value: float
    total_cost: float
    unrealized_pnl: float
    realized_pnl: float
    dividends: float
    total_return: float
    total_return_rate: float
    dividend_yield: float
    unrealized_pnl_rate: float
    holdings: tuple[PeriodHolding, ...] = ()
    contributions: tuple[InstrumentContribution, ...] = ()
    rankings: ContributionRankings = field(default_factory=ContributionRankings)

    @property
    def rows(self) -> tuple[PeriodHolding, ...]:
        return self.holdings


def period_cutoff(year: int, month: int | None = None, as_of: date | None = None) -> date:
    """Last day of the period, clamped to ``as_of`` when that is earlier.

    Examples:
        >>> period_cutoff(2023)
        datetime.date(2023, 12, 31)
        >>> period_cutoff(2024, 2)
        datetime.date(2024, 2, 29)
    """
    end_month = 12 if month is None else validate_month(month)
    cutoff = date(year, end_month, calendar.monthrange(year, end_month)[1])
    if as_of is not None and as_of < cutoff:
        return as_of
    return cutoff


def resolve_price_as_of(
    holding: Holding, history: PriceHistory | None, cutoff: date
) -> float:
    """Price of ``holding`` at ``cutoff``.

    Resolution order: the exact snapshot of the cutoff month, the latest
    earlier snapshot, the latest trade price on or before the cutoff, and
    finally the holding's current price.
    """
    key = key_for_date(cutoff)
    if history is not None:
        exact = history.price_for(key)
        if exact is not None:
            return exact
        earlier = history.latest_at_or_before(key)
        if earlier is not None:
            return earlier
    truncated = sorted_transactions(holding.truncated(cutoff).transactions)
    if truncated:
        return truncated[-1].price
    return holding.current_price


def resolve_latest_price(holding: Holding, history: PriceHistory | None) -> float:
    """Latest recorded snapshot, else the holding's current price."""
    latest = history.latest() if history is not None else None
    return holding.current_price if latest is None else latest


def available_years(holdings: Iterable[Holding], dividends: Iterable[Dividend]) -> list[int]:
    """Years with any transaction or distribution, newest first."""
    years: set[int] = set()
    for holding in holdings:
        years |= holding.transaction_years()
    years |= {d.date.year for d in dividends}
    return sorted(years, reverse=True)


def _in_period(day: date, year: int, month: int | None) -> bool:
    return day.year == year and (month is None or day.month == month)


def _ranked(
    contributions: list[InstrumentContribution], attribute: str, descending: bool
) -> tuple[RankedValue, ...]:
    ordered = sorted(contributions, key=lambda c: getattr(c, attribute), reverse=descending)
    return tuple(
        RankedValue(c.symbol, getattr(c, attribute)) for c in ordered[:CONTRIBUTION_RANK_SIZE]
    )


def rank_contributions(contributions: list[InstrumentContribution]) -> ContributionRankings:
    """Top/bottom instruments; the bottom yield ranking skips non-payers."""
    payers = [c for c in contributions if c.average_annualized_yield > ZERO]
    return ContributionRankings(
        top_pnl=_ranked(contributions, "unrealized_pnl_percent", True),
        bottom_pnl=_ranked(contributions, "unrealized_pnl_percent", False),
        top_total_return=_ranked(contributions, "total_return_with_dividends_percent", True),
        bottom_total_return=_ranked(contributions, "total_return_with_dividends_percent", False),
        top_yield=_ranked(contributions, "average_annualized_yield", True),
        bottom_yield=_ranked(payers, "average_annualized_yield", False),
    )


def _contribution(
    period_holding: PeriodHolding, dividends: list[Dividend], metadata: MetadataMap
) -> InstrumentContribution:
    financials = period_holding.financials
    summary = summarize_instrument_dividends(
        period_holding.symbol,
        dividends,
        financials,
        frequency=metadata.frequency_for(period_holding.symbol),
    )
    return InstrumentContribution(
        symbol=period_holding.symbol,
        unrealized_pnl_percent=financials.unrealized_pnl_percent,
        total_return_with_dividends_percent=percentage(
            financials.unrealized_pnl + summary.total_amount, financials.total_cost
        ),
        average_annualized_yield=summary.average_annualized_yield,
    )


@log_calculation
def compute_period_statistics(
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    price_histories: dict[str, PriceHistory],
    year: int | None = None,
    month: int | None = None,
    as_of: date | None = None,
    symbols: Iterable[str] | None = None,
    metadata: MetadataMap | None = None,
) -> PeriodStatistics:
    """Reconstruct portfolio figures for a period.

    Args:
        holdings: Portfolio holdings with their full logs
        dividends: All recorded distributions
        price_histories: Monthly snapshots keyed by symbol
        year: Target year; None for all-time figures
        month: Target month within ``year``; None for the whole year
        as_of: "Today"; the cutoff never goes past it. Defaults to today
        symbols: Restrict the figures to these instruments
        metadata: Payout frequencies for the yield contributions

    Returns:
        PeriodStatistics for the period

    Raises:
        ValidationError: If ``month`` is given without ``year``
    """
    if year is None and month is not None:
        raise ValidationError("A month filter requires a year")
    metadata = metadata or MetadataMap()
    wanted = set(symbols) if symbols is not None else None
    selected = [h for h in holdings if wanted is None or h.symbol in wanted]
    selected_dividends = [d for d in dividends if wanted is None or d.symbol in wanted]

    cutoff: date | None = None
    if year is not None:
        cutoff = period_cutoff(year, month, as_of or date.today())
        period_dividends = [d for d in selected_dividends if _in_period(d.date, year, month)]
    else:
        period_dividends = selected_dividends

    held: list[PeriodHolding] = []
    realized_pnl = ZERO
    for holding in selected:
        history = price_histories.get(holding.symbol)
        if cutoff is None:
            price = resolve_latest_price(holding, history)
            financials = compute_financials(holding, current_price=price)
            realized_pnl += financials.realized_pnl
        else:
            truncated = holding.truncated(cutoff)
            price = resolve_price_as_of(holding, history, cutoff)
            financials = compute_financials(truncated, current_price=price)
            realized_pnl += compute_financials(holding).realized_in(year, month)

        if financials.is_held:
            held.append(PeriodHolding(holding.symbol, holding.name, price, financials))

    market_value = sum(h.financials.market_value for h in held)
    total_cost = sum(h.financials.total_cost for h in held)
    unrealized = market_value - total_cost
    dividend_total = sum(d.amount for d in period_dividends)
    total_return = unrealized + realized_pnl + dividend_total

    contributions = [
        _contribution(h, [d for d in period_dividends if d.symbol == h.symbol], metadata)
        for h in held
    ]

    return PeriodStatistics(
        year=year,
        month=month,
        cutoff=cutoff,
        market_value=market_value,
        total_cost=total_cost,
        unrealized_pnl=unrealized,
        realized_pnl=realized_pnl,
        dividends=dividend_total,
        total_return=total_return,
        total_return_rate=percentage(total_return, total_cost),
        dividend_yield=percentage(dividend_total, total_cost),
        unrealized_pnl_rate=percentage(unrealized, total_cost),
        holdings=tuple(held),
        contributions=tuple(contributions),
        rankings=rank_contributions(contributions),
    )
