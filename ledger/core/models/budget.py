"""
Cash-movement domain models: manual budget entries and donations.
"""

from dataclasses import dataclass
from datetime import date

from ledger.core.enums import BudgetEntryType
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.utils.validation import parse_trade_date


@dataclass(frozen=True)
class BudgetEntry:
    """A manual deposit into or withdrawal from the investment budget."""

    id: str
    type: BudgetEntryType
    amount: float
    date: date
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Budget entry id cannot be empty")
        if not isinstance(self.type, BudgetEntryType):
            try:
                object.__setattr__(self, "type", BudgetEntryType(str(self.type).upper()))
            except ValueError as e:
                raise ValidationError(f"Invalid budget entry type: {self.type}") from e
        object.__setattr__(self, "date", parse_trade_date(self.date))
        if self.amount < 0:
            raise ValidationError(f"Budget amount must be non-negative, got {self.amount}")

    @property
    def inflow(self) -> float:
        return self.amount if self.type.is_inflow else 0.0

    @property
    def outflow(self) -> float:
        return 0.0 if self.type.is_inflow else self.amount


@dataclass(frozen=True)
class Donation:
    """Money given away from the donation fund; always a cash outflow."""

    id: str
    amount: float
    date: date
    description: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Donation id cannot be empty")
        object.__setattr__(self, "date", parse_trade_date(self.date))
        if self.amount <= 0:
            raise ValidationError(f"Donation amount must be positive, got {self.amount}")
