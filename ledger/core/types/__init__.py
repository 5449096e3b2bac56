"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    AMOUNT_DECIMALS,
    HUNDRED,
    ONE,
    PERCENTAGE_DECIMALS,
    PRICE_DECIMALS,
    SHARE_DECIMALS,
    ZERO,
    buy_cost,
    percentage,
    round_amount,
    round_percentage,
    round_price,
    round_shares,
    safe_divide,
    safe_float_comparison,
    sell_proceeds,
    to_float,
)

__all__ = [
    # Utility functions
    "to_float",
    "safe_divide",
    "percentage",
    "round_amount",
    "round_price",
    "round_shares",
    "round_percentage",
    "buy_cost",
    "sell_proceeds",
    "safe_float_comparison",
    # Constants
    "AMOUNT_DECIMALS",
    "PERCENTAGE_DECIMALS",
    "PRICE_DECIMALS",
    "SHARE_DECIMALS",
    "ZERO",
    "ONE",
    "HUNDRED",
]
