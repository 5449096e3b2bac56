"""
Core enumerations for the investment ledger.

This module provides centralized enumerations for domain concepts
like transaction kinds, budget sources, currencies and instrument categories.
"""

from .settings_types import Currency, DisplayMode, InstrumentCategory, Market
from .transaction_types import BudgetEntryType, LedgerSource, OverSellPolicy, TransactionType

__all__ = [
    "TransactionType",
    "BudgetEntryType",
    "LedgerSource",
    "OverSellPolicy",
    "Currency",
    "DisplayMode",
    "Market",
    "InstrumentCategory",
]
