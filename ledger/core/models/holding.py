"""
Instrument holding domain model.

A holding owns the transaction log of one symbol. The log is kept in
insertion order; the Lot Ledger sorts a copy on every evaluation and the
stored order is never rewritten.
"""

from dataclasses import dataclass, field, replace
from datetime import date

from ledger.core.exceptions.ledger import RecordNotFoundError, ValidationError
from ledger.core.utils.validation import validate_non_negative, validate_symbol

from .transaction import Transaction


@dataclass(frozen=True)
class Holding:
    """One instrument in the portfolio with its transaction log."""

    symbol: str
    name: str
    current_price: float
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate holding data and freeze the transaction log."""
        object.__setattr__(self, "symbol", validate_symbol(self.symbol))
        validate_non_negative(self.current_price, "current_price")
        if not isinstance(self.transactions, tuple):
            object.__setattr__(self, "transactions", tuple(self.transactions))

        seen: set[str] = set()
        for transaction in self.transactions:
            if transaction.id in seen:
                raise ValidationError(
                    f"Duplicate transaction id {transaction.id} in holding {self.symbol}"
                )
            seen.add(transaction.id)

    @property
    def has_sell(self) -> bool:
        return any(t.is_sell for t in self.transactions)

    def find_transaction(self, transaction_id: str) -> Transaction:
        """Return the transaction with the given id.

        Raises:
            RecordNotFoundError: If no transaction has that id
        """
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        raise RecordNotFoundError("Transaction", transaction_id)

    def with_transaction(self, transaction: Transaction) -> "Holding":
        """Return a copy with ``transaction`` appended to the log."""
        return replace(self, transactions=(*self.transactions, transaction))

    def replacing_transaction(self, transaction: Transaction) -> "Holding":
        """Return a copy with the transaction of the same id edited in place."""
        self.find_transaction(transaction.id)
        return replace(
            self,
            transactions=tuple(
                transaction if t.id == transaction.id else t for t in self.transactions
            ),
        )

    def without_transaction(self, transaction_id: str) -> "Holding":
        """Return a copy with the transaction removed from the log."""
        self.find_transaction(transaction_id)
        return replace(
            self, transactions=tuple(t for t in self.transactions if t.id != transaction_id)
        )

    def with_price(self, current_price: float) -> "Holding":
        """Return a copy carrying a new current price."""
        return replace(self, current_price=current_price)

    def truncated(self, cutoff: date) -> "Holding":
        """Return a copy whose log only keeps transactions dated on or before ``cutoff``."""
        return replace(self, transactions=tuple(t for t in self.transactions if t.date <= cutoff))

    def transaction_years(self) -> set[int]:
        """Calendar years that contain at least one transaction."""
        return {t.date.year for t in self.transactions}
