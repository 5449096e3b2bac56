"""
User settings consumed by the presentation layer.

The accounting engine never reads these; they drive formatting and the
default fee suggested when a transaction is entered.
"""

import math
from dataclasses import dataclass

from ledger.core.constants import DEFAULT_TAX_RATE, DEFAULT_TRANSACTION_FEE_RATE
from ledger.core.enums import Currency, DisplayMode, TransactionType
from ledger.core.exceptions.ledger import ValidationError


@dataclass(frozen=True)
class Settings:
    currency: Currency = Currency.TWD
    transaction_fee_rate: float = DEFAULT_TRANSACTION_FEE_RATE
    tax_rate: float = DEFAULT_TAX_RATE
    display_mode: DisplayMode = DisplayMode.PERCENTAGE

    def __post_init__(self) -> None:
        if not 0 <= self.transaction_fee_rate < 1:
            raise ValidationError(
                f"Transaction fee rate must be between 0 and 1, got {self.transaction_fee_rate}"
            )
        if not 0 <= self.tax_rate < 1:
            raise ValidationError(f"Tax rate must be between 0 and 1, got {self.tax_rate}")

    def default_fee(self, transaction_type: TransactionType, shares: float, price: float) -> float:
        """Suggested fees for a trade, floored to whole currency units.

        Sells also pay the transaction tax.
        """
        notional = shares * price
        fee = notional * self.transaction_fee_rate
        if transaction_type.is_sell:
            fee += notional * self.tax_rate
        return float(math.floor(fee))

    def format_amount(self, value: float, fraction_digits: int | None = None) -> str:
        """Format an amount in the home currency, e.g. ``TWD 1,234``."""
        digits = self.currency.fraction_digits if fraction_digits is None else fraction_digits
        if math.isnan(value):
            value = 0.0
        return f"{self.currency.value} {value:,.{digits}f}"
