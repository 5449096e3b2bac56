"""
Tabular report exports.

Turns engine results into pandas DataFrames for printing and CSV export.
Frames always carry their full column set, even when empty.
"""

from collections.abc import Iterable

import pandas as pd

from ledger.core.accounting.budget_ledger import BudgetLedger, LedgerRow
from ledger.core.accounting.compound_simulator import ProjectionPoint
from ledger.core.accounting.dividend_yield import DividendGroup
from ledger.core.accounting.lot_ledger import HoldingFinancials
from ledger.core.accounting.net_worth import NetWorthPoint, OverlayPoint
from ledger.core.accounting.snapshot_reconstructor import PeriodStatistics
from ledger.core.accounting.total_return import TotalReturnRow

HOLDING_COLUMNS = [
    "symbol",
    "shares",
    "average_cost",
    "total_cost",
    "price",
    "market_value",
    "unrealized_pnl",
    "unrealized_pnl_percent",
    "realized_pnl",
]
LEDGER_COLUMNS = ["date", "source", "description", "inflow", "outflow", "balance"]
DIVIDEND_COLUMNS = [
    "symbol",
    "name",
    "distributions",
    "total_amount",
    "yield_rate",
    "average_annualized_yield",
    "current_shares",
]
PROJECTION_COLUMNS = ["year", "projected_balance", "total_invested"]
NET_WORTH_COLUMNS = [
    "year",
    "market_value",
    "cost",
    "cumulative_realized_pnl",
    "cumulative_dividends",
    "net_worth",
    "adjusted_net_worth",
]
TOTAL_RETURN_COLUMNS = [
    "symbol",
    "name",
    "shares",
    "total_cost",
    "market_value",
    "unrealized_pnl",
    "dividend_income",
    "total_pnl",
    "return_rate",
]


def holdings_frame(financials: Iterable[HoldingFinancials]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "symbol": f.symbol,
                "shares": f.current_shares,
                "average_cost": f.average_cost,
                "total_cost": f.total_cost,
                "price": f.current_price,
                "market_value": f.market_value,
                "unrealized_pnl": f.unrealized_pnl,
                "unrealized_pnl_percent": f.unrealized_pnl_percent,
                "realized_pnl": f.realized_pnl,
            }
            for f in financials
        ],
        columns=HOLDING_COLUMNS,
    )


def period_statistics_frame(stats: PeriodStatistics) -> pd.DataFrame:
    """One-row frame of the period totals."""
    return pd.DataFrame(
        [
            {
                "year": stats.year if stats.year is not None else "all",
                "month": stats.month,
                "market_value": stats.market_value,
                "total_cost": stats.total_cost,
                "unrealized_pnl": stats.unrealized_pnl,
                "realized_pnl": stats.realized_pnl,
                "dividends": stats.dividends,
                "total_return": stats.total_return,
                "total_return_rate": stats.total_return_rate,
                "dividend_yield": stats.dividend_yield,
            }
        ]
    )


def ledger_frame(rows: BudgetLedger | Iterable[LedgerRow]) -> pd.DataFrame:
    """Budget ledger rows in the order given; a ``BudgetLedger`` is shown newest first."""
    if isinstance(rows, BudgetLedger):
        rows = rows.descending()
    return pd.DataFrame(
        [
            {
                "date": row.date,
                "source": row.source.value,
                "description": row.description,
                "inflow": row.inflow,
                "outflow": row.outflow,
                "balance": row.balance,
            }
            for row in rows
        ],
        columns=LEDGER_COLUMNS,
    )


def dividend_groups_frame(groups: Iterable[DividendGroup]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "symbol": g.symbol,
                "name": g.name,
                "distributions": len(g.details),
                "total_amount": g.total_amount,
                "yield_rate": g.yield_rate,
                "average_annualized_yield": g.average_annualized_yield,
                "current_shares": g.current_shares,
            }
            for g in groups
        ],
        columns=DIVIDEND_COLUMNS,
    )


def projection_frame(points: Iterable[ProjectionPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "year": p.year,
                "projected_balance": p.projected_balance,
                "total_invested": p.total_invested,
            }
            for p in points
        ],
        columns=PROJECTION_COLUMNS,
    )


def net_worth_frame(points: Iterable[NetWorthPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [{column: getattr(p, column) for column in NET_WORTH_COLUMNS} for p in points],
        columns=NET_WORTH_COLUMNS,
    )


def overlay_frame(points: Iterable[OverlayPoint]) -> pd.DataFrame:
    """Projected and actual values by year; years without actuals are NaN."""
    frame = pd.DataFrame(
        [{"year": p.year, "estimated": p.estimated, "actual": p.actual} for p in points],
        columns=["year", "estimated", "actual"],
    )
    frame["actual"] = pd.to_numeric(frame["actual"])
    return frame


def total_return_frame(rows: Iterable[TotalReturnRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "symbol": r.symbol,
                "name": r.name,
                "shares": r.financials.current_shares,
                "total_cost": r.total_cost,
                "market_value": r.market_value,
                "unrealized_pnl": r.financials.unrealized_pnl,
                "dividend_income": r.dividend_income,
                "total_pnl": r.total_pnl,
                "return_rate": r.return_rate,
            }
            for r in rows
        ],
        columns=TOTAL_RETURN_COLUMNS,
    )


def monthly_dividend_frame(groups: Iterable[DividendGroup]) -> pd.DataFrame:
    """Distribution amounts pivoted to one row per month and one column per symbol."""
    records = [
        {
            "month": detail.dividend.date.strftime("%Y-%m"),
            "symbol": group.symbol,
            "amount": detail.dividend.amount,
        }
        for group in groups
        for detail in group.details
    ]
    if not records:
        return pd.DataFrame()
    frame = pd.DataFrame(records)
    return frame.pivot_table(
        index="month", columns="symbol", values="amount", aggfunc="sum", fill_value=0.0
    ).sort_index()
