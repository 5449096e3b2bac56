"""
Compound Growth Simulator.

Deterministic month-by-month projection of a reinvestment strategy, plus
the whole-portfolio baseline projection drawn next to the actual
net-worth series. Outputs are unrounded; rounding is left to the
presentation layer.
"""

from dataclasses import dataclass

from ledger.core.constants import (
    DEFAULT_BASELINE_PROJECTION_YEARS,
    DEFAULT_EXPECTED_DIVIDEND_RATE,
    DEFAULT_EXPECTED_PNL_RATE,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_SIMULATION_FREQUENCY,
    MAX_PROJECTION_YEARS,
    MONTHS_PER_YEAR,
)
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.models.metadata import InstrumentMetadata, MetadataMap
from ledger.core.models.strategy import Strategy
from ledger.core.types.financial import HUNDRED, ONE, ZERO
from ledger.core.utils.decorators import log_calculation


@dataclass(frozen=True)
class ProjectionPoint:
    year: int
    projected_balance: float
    total_invested: float


@dataclass(frozen=True)
class BaselinePoint:
    year: int
    estimated: float


def _validate_years(years: int) -> int:
    if not isinstance(years, int) or not 1 <= years <= MAX_PROJECTION_YEARS:
        raise ValidationError(
            f"Projection horizon must be between 1 and {MAX_PROJECTION_YEARS} years, got {years}"
        )
    return years


def monthly_growth_factor(annual_rate: float) -> float:
    """Monthly factor that compounds to ``annual_rate`` percent over a year."""
    return (ONE + annual_rate / HUNDRED) ** (ONE / MONTHS_PER_YEAR)


@log_calculation
def simulate_strategy(
    strategy: Strategy,
    metadata: MetadataMap | InstrumentMetadata | None,
    start_year: int,
    years: int = DEFAULT_PROJECTION_YEARS,
) -> list[ProjectionPoint]:
    """Project a strategy's balance year by year.

    Each month: add the monthly contribution, grow by the monthly factor;
    in an ex-dividend month add the extra contribution, then pay a
    dividend of ``balance * yield / frequency``, added back when the
    strategy reinvests. Without metadata there are no ex-dividend months
    and the payout frequency falls back to the simulator default.

    Args:
        strategy: Strategy parameters
        metadata: Metadata map (looked up by target symbol) or the entry itself
        start_year: Year the projection starts from; point ``y`` is
            labelled ``start_year + y``
        years: Horizon in years

    Returns:
        One ProjectionPoint per simulated year
    """
    _validate_years(years)
    if isinstance(metadata, MetadataMap):
        meta = metadata.get(strategy.target_symbol)
    else:
        meta = metadata
    frequency = meta.frequency if meta is not None else DEFAULT_SIMULATION_FREQUENCY
    ex_div_months = set(meta.ex_div_months) if meta is not None else set()

    growth = monthly_growth_factor(strategy.expected_annual_return)
    dividend_rate = strategy.expected_dividend_yield / HUNDRED / frequency

    balance = strategy.initial_amount
    invested = strategy.initial_amount
    points: list[ProjectionPoint] = []
    for y in range(1, years + 1):
        for month in range(1, MONTHS_PER_YEAR + 1):
            balance += strategy.monthly_amount
            invested += strategy.monthly_amount
            balance *= growth
            if month in ex_div_months:
                balance += strategy.ex_div_extra_amount
                invested += strategy.ex_div_extra_amount
                dividend = balance * dividend_rate
                if strategy.reinvest:
                    balance += dividend
        points.append(ProjectionPoint(start_year + y, balance, invested))
    return points


def project_baseline_growth(
    base_cost: float,
    base_cumulative_dividends: float,
    start_year: int,
    years: int = DEFAULT_BASELINE_PROJECTION_YEARS,
    expected_pnl_rate: float = DEFAULT_EXPECTED_PNL_RATE,
    expected_dividend_rate: float = DEFAULT_EXPECTED_DIVIDEND_RATE,
) -> list[BaselinePoint]:
    """Project the base-year principal forward.

    The principal grows at the expected P&L rate while principal plus the
    dividends collected up to the base year grow at the expected dividend
    rate; the principal is counted once. Points run from ``start_year``
    (n = 0) to ``start_year + years`` inclusive.
    """
    _validate_years(years)
    pnl = expected_pnl_rate / HUNDRED
    div = expected_dividend_rate / HUNDRED
    points = []
    for n in range(years + 1):
        stock_asset = base_cost * (ONE + pnl) ** n
        dividend_asset = (base_cost + base_cumulative_dividends) * (ONE + div) ** n - base_cost
        points.append(BaselinePoint(start_year + n, stock_asset + dividend_asset))
    return points


def suggested_rates(unrealized_pnl_rate: float, dividend_yield: float) -> tuple[float, float]:
    """Default expected rates for the baseline projection.

    Uses the observed rates rounded to one decimal, floored at zero, and
    the fixed defaults whenever an observed rate is zero.
    """
    pnl = max(ZERO, round(unrealized_pnl_rate, 1))
    div = max(ZERO, round(dividend_yield, 1))
    return (
        pnl if pnl != ZERO else DEFAULT_EXPECTED_PNL_RATE,
        div if div != ZERO else DEFAULT_EXPECTED_DIVIDEND_RATE,
    )
