"""
Transaction and cash-flow type enumerations.

This module defines the allowed transaction kinds, budget entry kinds and
the sources that feed the budget ledger.
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """
    Allowed transaction kinds.

    Values match the persisted backup format.
    """

    BUY = "BUY"
    SELL = "SELL"

    @property
    def is_buy(self) -> bool:
        """Check if the transaction opens a lot."""
        return self == self.BUY

    @property
    def is_sell(self) -> bool:
        """Check if the transaction consumes lots."""
        return self == self.SELL

    @classmethod
    def from_string(cls, value: str) -> "TransactionType":
        """
        Convert string to TransactionType, with case-insensitive matching.

        Raises:
            ValueError: If the value is not BUY or SELL
        """
        value_upper = value.strip().upper()
        try:
            return cls(value_upper)
        except ValueError as e:
            raise ValueError(
                f"Unsupported transaction type: {value}. "
                f"Supported types: {', '.join([t.value for t in cls])}"
            ) from e


class BudgetEntryType(StrEnum):
    """Manual budget entry kinds."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"

    @property
    def is_inflow(self) -> bool:
        """Check if the entry adds cash to the budget."""
        return self == self.DEPOSIT


class LedgerSource(StrEnum):
    """
    Origin of a budget ledger row.

    Only ``MANUAL`` rows are user-editable.
    """

    STOCK = "stock"
    DIVIDEND = "dividend"
    DONATION = "donation"
    MANUAL = "manual"

    @property
    def is_editable(self) -> bool:
        """Check if rows from this source can be edited directly."""
        return self == self.MANUAL


class OverSellPolicy(StrEnum):
    """
    How the Lot Ledger treats a sell larger than the open lots.

    ZERO_COST: excess shares carry no cost basis and are flagged on the sell.
    REJECT: the ledger raises ``OverSellError``.
    """

    ZERO_COST = "zero_cost"
    REJECT = "reject"
