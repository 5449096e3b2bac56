"""
Dividend distribution domain model.
"""

import math
from dataclasses import dataclass
from datetime import date

from ledger.core.constants import DIVIDEND_REMITTANCE_FEE
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.utils.validation import parse_trade_date, validate_symbol


@dataclass(frozen=True)
class Dividend:
    """A cash distribution received for one instrument.

    Dividends are recorded independently of the transaction log;
    ``shares_held`` is what the holder declared at distribution time.
    """

    id: str
    symbol: str
    amount: float
    date: date
    shares_held: float | None = None
    dividend_per_share: float | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Dividend id cannot be empty")
        object.__setattr__(self, "symbol", validate_symbol(self.symbol))
        object.__setattr__(self, "date", parse_trade_date(self.date, "distribution date"))
        if self.amount < 0:
            raise ValidationError(f"Dividend amount must be non-negative, got {self.amount}")
        if self.shares_held is not None and self.shares_held < 0:
            raise ValidationError(f"Shares held must be non-negative, got {self.shares_held}")
        if self.dividend_per_share is not None and self.dividend_per_share < 0:
            raise ValidationError(
                f"Dividend per share must be non-negative, got {self.dividend_per_share}"
            )

    @property
    def effective_shares(self) -> float:
        """Shares held at distribution, 0 when not recorded."""
        return self.shares_held or 0.0


def net_dividend_amount(
    shares_held: float, dividend_per_share: float, fee: float = DIVIDEND_REMITTANCE_FEE
) -> float:
    """Net cash credited for a distribution.

    Gross amount minus the flat remittance fee, floored to whole currency
    units and never negative.

    Examples:
        >>> net_dividend_amount(1000, 0.72)
        710.0
        >>> net_dividend_amount(5, 1.0)
        0.0
    """
    return float(max(0, math.floor(shares_held * dividend_per_share - fee)))
