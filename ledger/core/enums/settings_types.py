"""
Settings and reference-data enumerations.
"""

from enum import StrEnum


class Currency(StrEnum):
    """Supported home currencies."""

    TWD = "TWD"
    USD = "USD"

    @property
    def fraction_digits(self) -> int:
        """Default number of decimals shown for amounts."""
        return 0 if self == self.TWD else 2


class DisplayMode(StrEnum):
    """How profit figures are presented."""

    PERCENTAGE = "PERCENTAGE"
    AMOUNT = "AMOUNT"


class Market(StrEnum):
    """Market an instrument tracks."""

    TW = "TW"
    US = "US"


class InstrumentCategory(StrEnum):
    """
    Instrument category used by the strategy lab.

    Only ``HIGH_DIVIDEND`` instruments are picked up as automatic
    reinvestment strategies.
    """

    MARKET_CAP = "market-cap"
    HIGH_DIVIDEND = "high-dividend"
    GROWTH = "growth"
    ACTIVE = "active"
    BOND = "bond"
    OTHER = "other"
