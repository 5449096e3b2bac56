"""
DataFrame report exports.
"""

from .frames import (
    dividend_groups_frame,
    holdings_frame,
    ledger_frame,
    monthly_dividend_frame,
    net_worth_frame,
    overlay_frame,
    period_statistics_frame,
    projection_frame,
    total_return_frame,
)

__all__ = [
    "holdings_frame",
    "period_statistics_frame",
    "ledger_frame",
    "dividend_groups_frame",
    "monthly_dividend_frame",
    "projection_frame",
    "net_worth_frame",
    "overlay_frame",
    "total_return_frame",
]
