"""
Transaction domain model.
"""

from dataclasses import dataclass
from datetime import date

from ledger.core.enums import TransactionType
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.types.financial import buy_cost, sell_proceeds
from ledger.core.utils.validation import parse_trade_date


@dataclass(frozen=True)
class Transaction:
    """A single BUY or SELL of one instrument, at day resolution."""

    id: str
    type: TransactionType
    shares: float
    price: float
    date: date
    fees: float = 0.0

    def __post_init__(self) -> None:
        """Validate and normalize transaction data after initialization."""
        if not self.id:
            raise ValidationError("Transaction id cannot be empty")
        if not isinstance(self.type, TransactionType):
            object.__setattr__(self, "type", TransactionType.from_string(str(self.type)))
        object.__setattr__(self, "date", parse_trade_date(self.date, "trade date"))

        if self.shares <= 0:
            raise ValidationError(f"Shares must be positive, got {self.shares}")
        if self.price < 0:
            raise ValidationError(f"Price must be non-negative, got {self.price}")
        if self.fees < 0:
            raise ValidationError(f"Fees must be non-negative, got {self.fees}")

    @property
    def is_buy(self) -> bool:
        return self.type.is_buy

    @property
    def is_sell(self) -> bool:
        return self.type.is_sell

    def notional_value(self) -> float:
        """Shares times price, before fees."""
        return self.shares * self.price

    def cash_amount(self) -> float:
        """Cash moved by the trade: cost for a buy, net proceeds for a sell."""
        if self.is_buy:
            return buy_cost(self.shares, self.price, self.fees)
        return sell_proceeds(self.shares, self.price, self.fees)
