"""
Portfolio accounting engine.

Every function here is pure: it reads immutable domain models and returns
new result objects without touching its inputs.
"""

from .budget_ledger import BudgetLedger, LedgerRow, build_budget_ledger
from .compound_simulator import (
    BaselinePoint,
    ProjectionPoint,
    project_baseline_growth,
    simulate_strategy,
    suggested_rates,
)
from .dividend_yield import (
    DividendDetail,
    DividendGroup,
    build_dividend_groups,
    summarize_instrument_dividends,
)
from .lot_ledger import HoldingFinancials, OpenLot, SellDetail, compute_financials
from .net_worth import NetWorthPoint, OverlayPoint, build_actual_series, overlay_series
from .snapshot_reconstructor import PeriodStatistics, available_years, compute_period_statistics
from .strategy_actuals import (
    MonthlyActual,
    YearlyActualStats,
    auto_strategies,
    monthly_actuals,
    yearly_actual_stats,
)
from .total_return import TotalReturnRow, build_total_return_table

__all__ = [
    # Lot Ledger
    "compute_financials",
    "HoldingFinancials",
    "OpenLot",
    "SellDetail",
    # Dividends
    "build_dividend_groups",
    "summarize_instrument_dividends",
    "DividendGroup",
    "DividendDetail",
    # Reconstruction
    "compute_period_statistics",
    "available_years",
    "PeriodStatistics",
    # Budget
    "build_budget_ledger",
    "BudgetLedger",
    "LedgerRow",
    # Projections
    "simulate_strategy",
    "project_baseline_growth",
    "suggested_rates",
    "ProjectionPoint",
    "BaselinePoint",
    "build_actual_series",
    "overlay_series",
    "NetWorthPoint",
    "OverlayPoint",
    # Total return
    "build_total_return_table",
    "TotalReturnRow",
    # Strategy actuals
    "monthly_actuals",
    "yearly_actual_stats",
    "auto_strategies",
    "MonthlyActual",
    "YearlyActualStats",
]
